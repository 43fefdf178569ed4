from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from pool_tags.config import AppConfig, SubgraphConfig
from pool_tags.config.loader import ConfigLocator, ConfigRepository


def test_config_locator_uses_env_and_creates_directories(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    home = tmp_path / "home"
    monkeypatch.setenv("POOL_TAGS_HOME", str(home))
    locator = ConfigLocator()
    assert locator.project_root == home.resolve()
    assert locator.config_path() == home.resolve() / "data" / "config.yaml"
    for path in (locator.data_dir, locator.outputs_dir, locator.logs_dir):
        assert path.exists()


def test_load_config_writes_defaults_when_missing(temp_config_repository: ConfigRepository) -> None:
    path = temp_config_repository.locator.config_path()
    assert not path.exists()
    config = temp_config_repository.load_config()
    assert config == AppConfig()
    assert path.exists()
    assert yaml.safe_load(path.read_text(encoding="utf-8"))["subgraph"]["page_size"] == 1000


def test_config_repository_roundtrip(tmp_path: Path) -> None:
    locator = ConfigLocator(project_root=tmp_path)
    repo = ConfigRepository(locator)
    config = AppConfig(subgraph=SubgraphConfig(page_size=500, timeout=12.5))
    repo.save_config(config)
    loaded = ConfigRepository(locator).load_config()
    assert loaded == config


def test_reset_config_restores_defaults(temp_config_repository: ConfigRepository) -> None:
    temp_config_repository.save_config(AppConfig(subgraph=SubgraphConfig(page_size=10)))
    assert temp_config_repository.reset_config() == AppConfig()
    assert ConfigRepository(temp_config_repository.locator).load_config().subgraph.page_size == 1000


def test_load_file_accepts_json(tmp_path: Path, temp_config_repository: ConfigRepository) -> None:
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"output": {"output_format": "jsonl"}}), encoding="utf-8")
    config = temp_config_repository.load_file(path)
    assert config.output.output_format == "jsonl"
    assert temp_config_repository.load_config() is config


def test_load_file_errors(tmp_path: Path, temp_config_repository: ConfigRepository) -> None:
    with pytest.raises(ValueError):
        temp_config_repository.load_file(tmp_path / "config.toml")
    with pytest.raises(FileNotFoundError):
        temp_config_repository.load_file(tmp_path / "missing.yaml")
    not_mapping = tmp_path / "list.yaml"
    not_mapping.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        temp_config_repository.load_file(not_mapping)
