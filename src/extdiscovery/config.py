"""Configuration loading and validation."""

from __future__ import annotations

import os
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from extdiscovery.errors import ConfigError, ConfigNotFoundError

__all__ = [
    "Config",
    "DiscoverySettings",
    "SearchRootSettings",
    "SCAN_TESTS_ENV_VAR",
    "resolve_include_tests",
]

SCAN_TESTS_ENV_VAR = "EXTDISCOVERY_SCAN_TESTS"

_TRUTHY = {"1", "true", "yes", "on"}


class SearchRootSettings(BaseModel):
    """A search root as written in a config file."""

    model_config = ConfigDict(extra="forbid")

    weight: int = 0
    path: str


class DiscoverySettings(BaseModel):
    """Validated ``discovery`` section of a config file."""

    model_config = ConfigDict(extra="forbid")

    root: str = "."
    search_roots: list[SearchRootSettings] = Field(
        default_factory=lambda: [SearchRootSettings(weight=0, path="modules/pdb")]
    )
    scan_tests: bool | None = None
    follow_symlinks: bool = True
    detect_symlink_cycles: bool = True
    excluded_directories: list[str] | None = None
    profile_directories: list[str] = Field(default_factory=list)


class Config:
    """Configuration accessor with dot-path key support.

    ``source_path`` is the file the data was loaded from, if any. Relative
    paths in the config are resolved against its directory.
    """

    def __init__(self, data: dict[str, Any] | None = None, source_path: str | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self.source_path = source_path

    @classmethod
    def load(cls, yaml_path: str) -> Config:
        """Load configuration from a YAML file.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigError: If the file is not valid YAML or not a mapping.
        """
        if not os.path.isfile(yaml_path):
            raise ConfigNotFoundError(config_path=yaml_path)

        with open(yaml_path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(message=f"Invalid YAML in {yaml_path}: {e}", cause=e) from e

        if data is None:
            return cls({}, source_path=yaml_path)
        if not isinstance(data, dict):
            raise ConfigError(message=f"Config must be a mapping, got {type(data).__name__}")
        return cls(data, source_path=yaml_path)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-path key."""
        parts = key.split(".")
        current: Any = self._data
        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    def discovery_settings(self) -> DiscoverySettings:
        """Validate and return the ``discovery`` section.

        Raises:
            ConfigError: If the section is not a mapping or fails validation.
        """
        section = self.get("discovery", {})
        if section is None:
            section = {}
        if not isinstance(section, dict):
            raise ConfigError(message="'discovery' config section must be a mapping")
        try:
            return DiscoverySettings.model_validate(section)
        except ValidationError as e:
            raise ConfigError(message=f"Invalid discovery settings: {e}", cause=e) from e


def resolve_include_tests(config: Config | None = None) -> bool:
    """Decide whether test extensions are discovered when the caller did not say.

    ``discovery.scan_tests`` in the config wins; otherwise the
    ``EXTDISCOVERY_SCAN_TESTS`` environment variable is consulted. Strings
    in either place count as true only when they read ``1``, ``true``,
    ``yes`` or ``on``.
    """
    if config is not None:
        value = config.get("discovery.scan_tests")
        if value is not None:
            return _is_truthy(value)
    return _is_truthy(os.environ.get(SCAN_TESTS_ENV_VAR, ""))


def _is_truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)
