"""Turn raw pool records into display tags."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Callable

from .records import NormalizedTag, PoolKind, RawPool

PROJECT_NAME = "Balancer v3"
WEBSITE_LINK = "https://balancer.fi"
MAX_NAME_LENGTH = 50
ELLIPSIS = "..."

_MARKUP = re.compile(r"<[^<>]+>")
_CASE_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_INTEGER = re.compile(r"^\d+$")
_NUMBER = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
# Numbers wider than this are shown as received.
MAX_DIGITS = 1000


def contains_markup(text: str) -> bool:
    """True when the text holds something shaped like an HTML tag."""

    return bool(_MARKUP.search(text))


def is_valid_record(record: RawPool) -> bool:
    """Records with a blank or markup-bearing kind are not formatted."""

    name = record.kind_name
    return bool(name.strip()) and not contains_markup(name)


def space_kind(name: str) -> str:
    """Insert a space at each lowercase/digit to uppercase boundary."""

    return _CASE_BOUNDARY.sub(" ", name)


def truncate_name(name: str, limit: int = MAX_NAME_LENGTH) -> str:
    if len(name) <= limit:
        return name
    return name[: limit - len(ELLIPSIS)] + ELLIPSIS


def _strip_fraction(text: str) -> str:
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _significant(value: Decimal, digits: int) -> str:
    if value.is_zero():
        return "0"
    quantum = Decimal(1).scaleb(value.adjusted() - digits + 1)
    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    return _strip_fraction(format(rounded, "f"))


def abbreviate_number(raw: str) -> str:
    """Compact rendering of a numeric string; non-numeric input is returned as is.

    >>> abbreviate_number("1234567")
    '1M'
    >>> abbreviate_number("0.123456")
    '0.1235'
    """

    text = str(raw).strip()
    if not _NUMBER.match(text):
        return raw
    try:
        value = Decimal(text)
    except InvalidOperation:
        return raw
    if abs(value.adjusted()) > MAX_DIGITS:
        return raw

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, abs(value.adjusted()) + 8)
        magnitude = abs(value)
        if magnitude >= 1_000_000:
            return f"{_round_half_up(value / 1_000_000)}M"
        if magnitude >= 1_000:
            return f"{_round_half_up(value / 1_000)}k"
        if magnitude < 1:
            return _significant(value, 4)
        if value == value.to_integral_value():
            return str(int(value))
        rounded = value.quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)
        return _strip_fraction(format(rounded, "f"))


def _display_value(value: Any) -> str | None:
    """Abbreviated value, or None when missing or unsafe to display."""

    if value is None:
        return None
    text = str(value).strip()
    if not text or contains_markup(text):
        return None
    return abbreviate_number(text)


def _pairs(*items: tuple[str, Any]) -> str:
    rendered: list[str] = []
    for label, value in items:
        display = _display_value(value)
        if display is None:
            return ""
        rendered.append(f"{label}={display}")
    return ", ".join(rendered)


def _stable_snippet(record: RawPool) -> str:
    params = record.stable_params
    if params is None:
        return ""
    return _pairs(("amp", params.amp))


def _weighted_snippet(record: RawPool) -> str:
    params = record.weighted_params
    if params is None or params.weights is None or None in params.weights:
        return ""
    return _pairs(("weights", len(params.weights)))


def _gyro2_snippet(record: RawPool) -> str:
    params = record.gyro2_params
    if params is None:
        return ""
    return _pairs(("sA", params.sqrt_alpha), ("sB", params.sqrt_beta))


def _gyroe_snippet(record: RawPool) -> str:
    params = record.gyro_e_params
    if params is None:
        return ""
    return _pairs(("a", params.alpha), ("b", params.beta))


def _quant_amm_snippet(record: RawPool) -> str:
    params = record.quant_amm_weighted_params
    if params is None:
        return ""
    return _pairs(("eMax", params.epsilon_max), ("mTSR", params.max_trade_size_ratio))


def _reclamm_snippet(record: RawPool) -> str:
    params = record.re_clamm_params
    if params is None:
        return ""
    return _pairs(("ts", params.last_timestamp))


def _lbp_snippet(_record: RawPool) -> str:
    # Token and owner addresses would blow the name length cap.
    return ""


SNIPPET_BUILDERS: dict[PoolKind, Callable[[RawPool], str]] = {
    PoolKind.STABLE: _stable_snippet,
    PoolKind.WEIGHTED: _weighted_snippet,
    PoolKind.GYRO2: _gyro2_snippet,
    PoolKind.GYROE: _gyroe_snippet,
    PoolKind.QUANT_AMM_WEIGHTED: _quant_amm_snippet,
    PoolKind.RECLAMM: _reclamm_snippet,
    PoolKind.LBP: _lbp_snippet,
}


def parameter_snippet(record: RawPool) -> str:
    kind = record.kind
    if kind is None:
        return ""
    return SNIPPET_BUILDERS[kind](record)


def _version_label(version: Any) -> str | None:
    if isinstance(version, bool):
        return None
    if isinstance(version, int):
        return str(version) if version >= 0 else None
    if isinstance(version, str) and _INTEGER.match(version.strip()):
        return str(int(version.strip()))
    return None


class TagFormatter:
    """Build `NormalizedTag` values for valid pool records."""

    def __init__(
        self,
        project_name: str = PROJECT_NAME,
        website_link: str = WEBSITE_LINK,
        max_name_length: int = MAX_NAME_LENGTH,
    ) -> None:
        self.project_name = project_name
        self.website_link = website_link
        self.max_name_length = max_name_length

    def display_name(self, record: RawPool) -> str:
        spaced = space_kind(record.kind_name)
        version = _version_label(record.kind_version)
        name = f"{spaced} Pool v{version}" if version is not None else f"{spaced} Pool"
        return truncate_name(name, self.max_name_length)

    def note(self, record: RawPool) -> str:
        text = f"A {self.project_name} '{space_kind(record.kind_name)}' pool."
        snippet = parameter_snippet(record)
        if snippet:
            text += f" Params: {snippet}."
        return text

    def format(self, chain_id: str, record: RawPool) -> NormalizedTag:
        return NormalizedTag(
            contract_address=f"eip155:{chain_id}:{record.address}",
            public_name_tag=self.display_name(record),
            project_name=self.project_name,
            ui_website_link=self.website_link,
            public_note=self.note(record),
        )


__all__ = [
    "ELLIPSIS",
    "MAX_DIGITS",
    "MAX_NAME_LENGTH",
    "PROJECT_NAME",
    "SNIPPET_BUILDERS",
    "TagFormatter",
    "WEBSITE_LINK",
    "abbreviate_number",
    "contains_markup",
    "is_valid_record",
    "parameter_snippet",
    "space_kind",
    "truncate_name",
]
