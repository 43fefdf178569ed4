"""Single-page GraphQL fetching against the pools subgraph."""

from __future__ import annotations

from typing import Any

import httpx
import pydantic
import structlog

from ..config import SubgraphConfig
from ..errors import EmptyResultError, ProtocolError, TransportError
from .queries import POOLS_QUERY, pools_variables
from .records import RawPool


class Fetcher:
    """Issue one paginated `pools` request per call; no retries."""

    def __init__(
        self,
        config: SubgraphConfig,
        logger: structlog.BoundLogger | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        self.page_size = config.page_size
        self.logger = logger or structlog.get_logger("pool_tags.fetcher")
        self._client = httpx.Client(
            timeout=config.timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *_exc_info: Any) -> None:
        self.close()

    def fetch(self, endpoint: str, cursor: str) -> list[RawPool]:
        """Return up to `page_size` pools with identifiers greater than `cursor`."""

        payload = {"query": POOLS_QUERY, "variables": pools_variables(cursor, self.page_size)}
        try:
            response = self._client.post(endpoint, json=payload)
        except httpx.TimeoutException as exc:
            self.logger.warning("fetch_error", cursor=cursor, error="timeout")
            raise TransportError(
                f"Request timed out after {self.config.timeout:g}s", cursor=cursor
            ) from exc
        except httpx.HTTPError as exc:
            self.logger.warning("fetch_error", cursor=cursor, error=str(exc))
            raise TransportError(f"Request failed: {exc}", cursor=cursor) from exc

        if self._is_failure(response):
            self.logger.warning("fetch_error", cursor=cursor, status=response.status_code)
            raise TransportError(
                f"Unexpected status {response.status_code}",
                cursor=cursor,
                status_code=response.status_code,
            )

        pools = self._extract_pools(self._decode(response, cursor), cursor)
        if len(pools) > self.page_size:
            raise ProtocolError(
                f"Page holds {len(pools)} records, more than the requested {self.page_size}",
                cursor=cursor,
            )
        try:
            batch = [RawPool.model_validate(item) for item in pools]
        except pydantic.ValidationError as exc:
            raise ProtocolError(f"Malformed pool record: {exc}", cursor=cursor) from exc
        self.logger.debug("page_received", cursor=cursor, count=len(batch))
        return batch

    # ------------------------------------------------------------------
    @staticmethod
    def _decode(response: httpx.Response, cursor: str) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as exc:
            raise ProtocolError("Response body is not valid JSON", cursor=cursor) from exc
        if not isinstance(body, dict):
            raise ProtocolError("Response body is not a JSON object", cursor=cursor)
        return body

    @staticmethod
    def _extract_pools(body: dict[str, Any], cursor: str) -> list[Any]:
        errors = body.get("errors")
        if errors:
            messages = [
                str(error.get("message", error)) if isinstance(error, dict) else str(error)
                for error in (errors if isinstance(errors, list) else [errors])
            ]
            raise ProtocolError("Subgraph returned errors", cursor=cursor, messages=messages)
        data = body.get("data")
        if not isinstance(data, dict) or data.get("pools") is None:
            raise EmptyResultError("Response has no pools container", cursor=cursor)
        pools = data["pools"]
        if not isinstance(pools, list):
            raise ProtocolError("pools container is not a list", cursor=cursor)
        return pools

    @staticmethod
    def _is_failure(response: Any) -> bool:
        status_code = getattr(response, "status_code", 0)
        return not 200 <= status_code < 300


__all__ = ["Fetcher"]
