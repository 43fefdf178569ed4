"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import (
    MAX_PAGE_SIZE,
    MIN_POOL_ID,
    SUPPORTED_CHAIN_ID,
    AppConfig,
    OutputConfig,
    SubgraphConfig,
)

__all__ = [
    "AppConfig",
    "ConfigLocator",
    "ConfigRepository",
    "MAX_PAGE_SIZE",
    "MIN_POOL_ID",
    "OutputConfig",
    "SUPPORTED_CHAIN_ID",
    "SubgraphConfig",
]
