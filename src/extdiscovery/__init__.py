"""extdiscovery - Locate and describe installable extensions on disk."""

from __future__ import annotations

# Core
from extdiscovery.discovery import (
    DirectoryScanner,
    ExtensionDiscovery,
    ExtensionFilter,
    FileCache,
    LineTypeParser,
    ManifestTypeParser,
    MemoryFileCache,
    ScanCache,
    SearchRoot,
    YamlTypeParser,
)
from extdiscovery.extension import Extension

# Config
from extdiscovery.config import Config, DiscoverySettings

# Errors
from extdiscovery.errors import (
    ConfigError,
    ConfigNotFoundError,
    DiscoveryError,
    ErrorCodes,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "ExtensionDiscovery",
    "DirectoryScanner",
    "Extension",
    "SearchRoot",
    # Manifest parsing
    "ManifestTypeParser",
    "LineTypeParser",
    "YamlTypeParser",
    # Filtering and caching
    "ExtensionFilter",
    "FileCache",
    "MemoryFileCache",
    "ScanCache",
    # Config
    "Config",
    "DiscoverySettings",
    # Errors
    "DiscoveryError",
    "ConfigError",
    "ConfigNotFoundError",
    "ErrorCodes",
]
