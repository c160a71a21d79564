"""Discovery types: SearchRoot and the per-root grouping aliases."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from extdiscovery.errors import ConfigError
from extdiscovery.extension import Extension

__all__ = [
    "SearchRoot",
    "ExtensionGroups",
    "coerce_search_root",
]

# type -> absolute manifest path -> Extension
ExtensionGroups = dict[str, dict[str, Extension]]


@dataclass(frozen=True)
class SearchRoot:
    """One base directory scanned for extensions.

    Attributes:
        weight: Precedence weight; roots with a higher weight override lower ones.
        path: Directory relative to the discovery root, without trailing slash.
    """

    weight: int
    path: str


def coerce_search_root(entry: Any) -> SearchRoot:
    """Accept a SearchRoot, a ``(weight, path)`` pair or a ``{"weight", "path"}`` mapping."""
    if isinstance(entry, SearchRoot):
        weight, path = entry.weight, entry.path
    elif isinstance(entry, dict):
        if "path" not in entry:
            raise ConfigError(message=f"Search root entry missing 'path': {entry!r}")
        weight, path = entry.get("weight", 0), entry["path"]
    elif isinstance(entry, (tuple, list)) and len(entry) == 2:
        weight, path = entry
    else:
        raise ConfigError(message=f"Invalid search root entry: {entry!r}")

    try:
        weight = int(weight)
    except (TypeError, ValueError) as e:
        raise ConfigError(message=f"Search root weight must be an integer: {entry!r}", cause=e) from e
    return SearchRoot(weight=weight, path=str(path).strip("/"))
