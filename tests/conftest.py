"""Shared fixtures for pool-tags tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable

import pytest

from pool_tags.config import AppConfig, ConfigLocator, ConfigRepository, SubgraphConfig
from pool_tags.engine.records import RawPool


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("POOL_TAGS_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def subgraph_config() -> SubgraphConfig:
    return SubgraphConfig(
        chain_id="42161",
        endpoint_template="https://graph.example/api/[api-key]/subgraphs/id/pools",
        page_size=1000,
        timeout=30.0,
    )


@pytest.fixture
def app_config(subgraph_config: SubgraphConfig, tmp_path: Path) -> AppConfig:
    return AppConfig.model_validate(
        {
            "subgraph": subgraph_config.model_dump(),
            "output": {"outputs_dir": str(tmp_path / "outputs"), "output_format": "json"},
        }
    )


def _pool_id(index: int) -> str:
    return f"0x{index:040x}"


@pytest.fixture
def make_pool() -> Callable[..., RawPool]:
    """Build a RawPool from subgraph-shaped keyword overrides."""

    def _builder(index: int = 1, **overrides: Any) -> RawPool:
        payload: dict[str, Any] = {
            "id": _pool_id(index),
            "address": _pool_id(index),
            "factory": {"type": "Weighted", "version": 1},
            "weightedParams": {"weights": ["0.5", "0.5"]},
        }
        payload.update(overrides)
        return RawPool.model_validate(payload)

    return _builder


@pytest.fixture
def temp_config_repository(tmp_path: Path) -> Iterable[ConfigRepository]:
    locator = ConfigLocator(project_root=tmp_path)
    repository = ConfigRepository(locator)
    yield repository
