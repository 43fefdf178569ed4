"""Raw pool records as returned by the subgraph, and the tags built from them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _SubgraphModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PoolKind(str, Enum):
    """Pool types known to the Balancer v3 factories."""

    STABLE = "Stable"
    WEIGHTED = "Weighted"
    GYRO2 = "Gyro2"
    GYROE = "GyroE"
    QUANT_AMM_WEIGHTED = "QuantAMMWeighted"
    RECLAMM = "ReClamm"
    LBP = "LBP"

    @classmethod
    def parse(cls, name: str | None) -> "PoolKind | None":
        if not name:
            return None
        try:
            return cls(name)
        except ValueError:
            return None


class PoolFactory(_SubgraphModel):
    type: str = ""
    # Left loose; the formatter decides whether it is a usable version.
    version: Any = None

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> str:
        return "" if value is None else str(value)


class StableParams(_SubgraphModel):
    amp: Any = None


class WeightedParams(_SubgraphModel):
    weights: list[Any] | None = None


class Gyro2Params(_SubgraphModel):
    sqrt_alpha: Any = Field(default=None, alias="sqrtAlpha")
    sqrt_beta: Any = Field(default=None, alias="sqrtBeta")


class GyroEParams(_SubgraphModel):
    alpha: Any = None
    beta: Any = None


class QuantAMMWeightedParams(_SubgraphModel):
    epsilon_max: Any = Field(default=None, alias="epsilonMax")
    max_trade_size_ratio: Any = Field(default=None, alias="maxTradeSizeRatio")


class ReClammParams(_SubgraphModel):
    last_timestamp: Any = Field(default=None, alias="lastTimestamp")


class LBPParams(_SubgraphModel):
    owner: Any = None
    project_token: Any = Field(default=None, alias="projectToken")
    reserve_token: Any = Field(default=None, alias="reserveToken")


class RawPool(_SubgraphModel):
    """One pool entity from the `pools` query."""

    id: str
    address: str
    factory: PoolFactory | None = None
    stable_params: StableParams | None = Field(default=None, alias="stableParams")
    weighted_params: WeightedParams | None = Field(default=None, alias="weightedParams")
    gyro2_params: Gyro2Params | None = Field(default=None, alias="gyro2Params")
    gyro_e_params: GyroEParams | None = Field(default=None, alias="gyroEParams")
    quant_amm_weighted_params: QuantAMMWeightedParams | None = Field(
        default=None, alias="quantAMMWeightedParams"
    )
    re_clamm_params: ReClammParams | None = Field(default=None, alias="reClammParams")
    lbp_params: LBPParams | None = Field(default=None, alias="lbpParams")

    @property
    def kind_name(self) -> str:
        if self.factory is None:
            return ""
        return self.factory.type or ""

    @property
    def kind_version(self) -> Any:
        if self.factory is None:
            return None
        return self.factory.version

    @property
    def kind(self) -> PoolKind | None:
        return PoolKind.parse(self.kind_name)


@dataclass(slots=True)
class NormalizedTag:
    """Display tag for one pool contract."""

    contract_address: str
    public_name_tag: str
    project_name: str
    ui_website_link: str
    public_note: str

    def as_dict(self) -> dict[str, str]:
        return {
            "Contract Address": self.contract_address,
            "Public Name Tag": self.public_name_tag,
            "Project Name": self.project_name,
            "UI/Website Link": self.ui_website_link,
            "Public Note": self.public_note,
        }


TAG_COLUMNS = (
    "Contract Address",
    "Public Name Tag",
    "Project Name",
    "UI/Website Link",
    "Public Note",
)


__all__ = [
    "Gyro2Params",
    "GyroEParams",
    "LBPParams",
    "NormalizedTag",
    "PoolFactory",
    "PoolKind",
    "QuantAMMWeightedParams",
    "RawPool",
    "ReClammParams",
    "StableParams",
    "TAG_COLUMNS",
    "WeightedParams",
]
