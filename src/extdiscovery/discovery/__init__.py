"""Extension discovery: directory scanning, manifest parsing and precedence resolution.

Usage::

    from extdiscovery.discovery import ExtensionDiscovery

    discovery = ExtensionDiscovery("/var/www/site")
    modules = discovery.scan("module")
"""

from __future__ import annotations

from extdiscovery.discovery.cache import FileCache, MemoryFileCache, ScanCache
from extdiscovery.discovery.filters import DEFAULT_EXCLUDED_DIRECTORIES, ExtensionFilter
from extdiscovery.discovery.manifest import (
    MANIFEST_SUFFIX,
    LineTypeParser,
    ManifestTypeParser,
    YamlTypeParser,
    extension_name,
)
from extdiscovery.discovery.orchestrator import (
    DEFAULT_SEARCH_ROOTS,
    ORIGIN_SITES_ALL,
    ExtensionDiscovery,
)
from extdiscovery.discovery.scanner import DirectoryScanner
from extdiscovery.discovery.types import ExtensionGroups, SearchRoot

__all__ = [
    "DEFAULT_EXCLUDED_DIRECTORIES",
    "DEFAULT_SEARCH_ROOTS",
    "MANIFEST_SUFFIX",
    "ORIGIN_SITES_ALL",
    "DirectoryScanner",
    "ExtensionDiscovery",
    "ExtensionFilter",
    "ExtensionGroups",
    "FileCache",
    "LineTypeParser",
    "ManifestTypeParser",
    "MemoryFileCache",
    "ScanCache",
    "SearchRoot",
    "YamlTypeParser",
    "extension_name",
]
