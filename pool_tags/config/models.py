"""Pydantic models describing the subgraph source and output settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

API_KEY_PLACEHOLDER = "[api-key]"
MAX_PAGE_SIZE = 1000
MIN_POOL_ID = "0x0000000000000000000000000000000000000000"

# Arbitrum One.
SUPPORTED_CHAIN_ID = "42161"
# Balancer v3 pools subgraph on Arbitrum, served by The Graph gateway.
DEFAULT_SUBGRAPH_ID = "Ad1cgTzScNmiDPSCeGYxgMU3YdRPrQXGkCZgpmPauauk"
DEFAULT_ENDPOINT_TEMPLATE = (
    f"https://gateway.thegraph.com/api/{API_KEY_PLACEHOLDER}/subgraphs/id/{DEFAULT_SUBGRAPH_ID}"
)


class SubgraphConfig(BaseModel):
    """Where and how pool pages are requested."""

    chain_id: str = SUPPORTED_CHAIN_ID
    endpoint_template: str = DEFAULT_ENDPOINT_TEMPLATE
    page_size: int = MAX_PAGE_SIZE
    timeout: float = 30.0
    initial_cursor: str = MIN_POOL_ID

    @field_validator("chain_id", mode="before")
    @classmethod
    def _coerce_chain_id(cls, value: Any) -> str:
        text = str(value).strip()
        if not text:
            raise ValueError("chain_id cannot be empty")
        return text

    @model_validator(mode="after")
    def _validate_limits(self) -> "SubgraphConfig":
        if API_KEY_PLACEHOLDER not in self.endpoint_template:
            raise ValueError(f"endpoint_template must contain {API_KEY_PLACEHOLDER}")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if not self.initial_cursor:
            raise ValueError("initial_cursor cannot be empty")
        return self

    def endpoint_for(self, api_key: str) -> str:
        return self.endpoint_template.replace(API_KEY_PLACEHOLDER, api_key.strip())

    def redacted_endpoint(self) -> str:
        """Endpoint safe to log: the key placeholder is left in place."""

        return self.endpoint_template


class OutputConfig(BaseModel):
    """Export destination for generated tags."""

    outputs_dir: Path = Field(default=Path("data/outputs"))
    output_format: Literal["json", "jsonl", "csv"] = "json"

    @field_validator("outputs_dir", mode="before")
    @classmethod
    def _coerce_dir(cls, value: Any) -> Path:
        return Path(value)

    def resolved_outputs_dir(self, base_dir: Path) -> Path:
        if not self.outputs_dir.is_absolute():
            return (base_dir / self.outputs_dir).resolve()
        return self.outputs_dir


class AppConfig(BaseModel):
    """Top level configuration file contents."""

    subgraph: SubgraphConfig = Field(default_factory=SubgraphConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


__all__ = [
    "API_KEY_PLACEHOLDER",
    "AppConfig",
    "DEFAULT_ENDPOINT_TEMPLATE",
    "DEFAULT_SUBGRAPH_ID",
    "MAX_PAGE_SIZE",
    "MIN_POOL_ID",
    "OutputConfig",
    "SUPPORTED_CHAIN_ID",
    "SubgraphConfig",
]
