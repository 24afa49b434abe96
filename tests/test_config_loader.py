"""Tests for config_loader."""
from __future__ import annotations

import json

import pytest

from config_loader import (
    CONFIG_ENV_VAR,
    ConfigError,
    load_config,
    resolve_runtime_settings,
)


def _write_config(path, **values):
    path.write_text(json.dumps(values), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _no_env_override(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


class TestLoadConfig:
    def test_paths_resolved_relative_to_config(self, tmp_path) -> None:
        config = _write_config(
            tmp_path / "config.json",
            journal_dir="./journal",
            lang_path="lang/de.json",
            world_id="w1",
        )
        data = load_config(str(config))
        assert data["journal_dir"] == str(tmp_path / "journal")
        assert data["lang_path"] == str(tmp_path / "lang" / "de.json")
        assert data["world_id"] == "w1"

    def test_missing_file_raises(self, tmp_path) -> None:
        with pytest.raises(ConfigError):
            load_config(str(tmp_path / "absent.json"))

    def test_invalid_json_raises(self, tmp_path) -> None:
        config = tmp_path / "config.json"
        config.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(str(config))

    def test_non_object_raises(self, tmp_path) -> None:
        config = tmp_path / "config.json"
        config.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError, match="must be an object"):
            load_config(str(config))

    def test_env_override(self, tmp_path, monkeypatch) -> None:
        config = _write_config(tmp_path / "env.json", world_id="from-env")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config))
        assert load_config()["world_id"] == "from-env"


class TestResolveRuntimeSettings:
    def test_defaults_filled(self, tmp_path) -> None:
        config = _write_config(
            tmp_path / "config.json", journal_dir="journal"
        )
        settings = resolve_runtime_settings(config_path=str(config))
        assert settings.journal_dir == str(tmp_path / "journal")
        assert settings.reserved_class == "world-anvil"
        assert settings.stylesheet_name == "world-anvil.css"
        assert settings.upload_timeout is None
        assert settings.category_folders == {}

    def test_cli_journal_dir_wins(self, tmp_path) -> None:
        config = _write_config(
            tmp_path / "config.json", journal_dir="journal"
        )
        settings = resolve_runtime_settings(
            config_path=str(config), journal_dir=str(tmp_path / "other")
        )
        assert settings.journal_dir == str(tmp_path / "other")

    def test_config_optional_with_journal_dir(
        self, tmp_path, monkeypatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        settings = resolve_runtime_settings(
            journal_dir="journal", require_config=False
        )
        assert settings.journal_dir == str(tmp_path / "journal")
        assert settings.upload_url is None

    def test_missing_journal_dir(self, tmp_path) -> None:
        config = _write_config(tmp_path / "config.json", world_id="w")
        with pytest.raises(ConfigError, match="journal_dir"):
            resolve_runtime_settings(config_path=str(config))

    def test_invalid_upload_timeout(self, tmp_path) -> None:
        config = _write_config(
            tmp_path / "config.json",
            journal_dir="j",
            upload_timeout="soon",
        )
        with pytest.raises(ConfigError, match="upload_timeout"):
            resolve_runtime_settings(config_path=str(config))

    def test_numeric_values_normalized(self, tmp_path) -> None:
        config = _write_config(
            tmp_path / "config.json",
            journal_dir="j",
            world_id=17,
            upload_timeout=5,
            category_folders={"3": "People"},
        )
        settings = resolve_runtime_settings(config_path=str(config))
        assert settings.world_id == "17"
        assert settings.upload_timeout == 5.0
        assert settings.category_folders == {"3": "People"}

    def test_folder_map_must_be_object(self, tmp_path) -> None:
        config = _write_config(
            tmp_path / "config.json",
            journal_dir="j",
            category_folders=["People"],
        )
        with pytest.raises(ConfigError, match="category_folders"):
            resolve_runtime_settings(config_path=str(config))
