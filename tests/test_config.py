"""Tests for Config loading, discovery settings and the include-tests signal."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from extdiscovery.config import (
    SCAN_TESTS_ENV_VAR,
    Config,
    DiscoverySettings,
    resolve_include_tests,
)
from extdiscovery.errors import ConfigError, ConfigNotFoundError, ErrorCodes


# === Config.load() / get() ===


class TestConfigLoad:
    def test_load_valid_yaml(self, tmp_path: Path) -> None:
        """A YAML mapping is exposed through dot-path keys."""
        path = tmp_path / "discovery.yaml"
        path.write_text(yaml.dump({"discovery": {"root": "/srv/site", "scan_tests": True}}))
        config = Config.load(str(path))
        assert config.get("discovery.root") == "/srv/site"
        assert config.get("discovery.scan_tests") is True
        assert config.source_path == str(path)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigNotFoundError) as exc_info:
            Config.load(str(tmp_path / "missing.yaml"))
        assert exc_info.value.code == ErrorCodes.CONFIG_NOT_FOUND
        assert exc_info.value.config_path.endswith("missing.yaml")

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("{{invalid yaml:")
        with pytest.raises(ConfigError):
            Config.load(str(path))

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            Config.load(str(path))

    def test_empty_file_is_empty_config(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert Config.load(str(path)).get("discovery") is None

    def test_in_memory_config_has_no_source(self) -> None:
        assert Config({"discovery": {}}).source_path is None

    def test_get_default_for_missing_key(self) -> None:
        config = Config({"discovery": {"root": "."}})
        assert config.get("discovery.nope", "fallback") == "fallback"
        assert config.get("discovery.root.deeper") is None


# === Config.discovery_settings() ===


class TestDiscoverySettings:
    def test_defaults(self) -> None:
        settings = Config().discovery_settings()
        assert isinstance(settings, DiscoverySettings)
        assert settings.root == "."
        assert [(r.weight, r.path) for r in settings.search_roots] == [(0, "modules/pdb")]
        assert settings.scan_tests is None
        assert settings.follow_symlinks is True
        assert settings.detect_symlink_cycles is True
        assert settings.excluded_directories is None
        assert settings.profile_directories == []

    def test_explicit_values(self) -> None:
        config = Config(
            {
                "discovery": {
                    "root": "/srv/site",
                    "search_roots": [
                        {"weight": 0, "path": "core"},
                        {"weight": 2, "path": "sites/all"},
                    ],
                    "follow_symlinks": False,
                    "excluded_directories": ["vendor"],
                }
            }
        )
        settings = config.discovery_settings()
        assert [r.path for r in settings.search_roots] == ["core", "sites/all"]
        assert settings.follow_symlinks is False
        assert settings.excluded_directories == ["vendor"]

    def test_unknown_key_raises(self) -> None:
        config = Config({"discovery": {"roots": ["core"]}})
        with pytest.raises(ConfigError) as exc_info:
            config.discovery_settings()
        assert exc_info.value.code == ErrorCodes.CONFIG_INVALID

    def test_search_root_missing_path_raises(self) -> None:
        config = Config({"discovery": {"search_roots": [{"weight": 1}]}})
        with pytest.raises(ConfigError):
            config.discovery_settings()

    def test_non_mapping_section_raises(self) -> None:
        with pytest.raises(ConfigError):
            Config({"discovery": ["core"]}).discovery_settings()


# === resolve_include_tests() ===


class TestResolveIncludeTests:
    def test_default_false(self) -> None:
        assert resolve_include_tests() is False
        assert resolve_include_tests(Config()) is False

    @pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
    def test_env_truthy(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv(SCAN_TESTS_ENV_VAR, value)
        assert resolve_include_tests() is True

    def test_env_falsy(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(SCAN_TESTS_ENV_VAR, "0")
        assert resolve_include_tests() is False

    def test_config_overrides_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(SCAN_TESTS_ENV_VAR, "1")
        config = Config({"discovery": {"scan_tests": False}})
        assert resolve_include_tests(config) is False

    @pytest.mark.parametrize("value", ["no", "false", "0", "off", ""])
    def test_config_string_falsy(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv(SCAN_TESTS_ENV_VAR, "1")
        assert resolve_include_tests(Config({"discovery": {"scan_tests": value}})) is False

    @pytest.mark.parametrize("value", ["yes", "True", " on "])
    def test_config_string_truthy(self, value: str) -> None:
        assert resolve_include_tests(Config({"discovery": {"scan_tests": value}})) is True
