"""Caches used by discovery: the file-content cache and the per-root scan cache."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from extdiscovery.discovery.types import ExtensionGroups
from extdiscovery.extension import Extension

__all__ = ["FileCache", "MemoryFileCache", "ScanCache"]


@runtime_checkable
class FileCache(Protocol):
    """Cache of Extension objects keyed by absolute manifest path.

    A hit is trusted as-is: the scanner does not re-read the manifest.
    Invalidation is up to whoever owns the cache.
    """

    def lookup(self, path: str) -> Extension | None: ...

    def store(self, path: str, extension: Extension) -> None: ...


class MemoryFileCache:
    """Dict-backed FileCache."""

    def __init__(self) -> None:
        self._entries: dict[str, Extension] = {}

    def lookup(self, path: str) -> Extension | None:
        return self._entries.get(path)

    def store(self, path: str, extension: Extension) -> None:
        self._entries[path] = extension

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class ScanCache:
    """Memoized scan results keyed by ``(base_dir, include_tests)``.

    One cache belongs to one discovery session. Discovery only ever adds
    entries; ``clear()`` ends the session's view of the filesystem.

    Not synchronized: share across threads only with external locking.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, bool], ExtensionGroups] = {}

    def get(self, base_dir: str, include_tests: bool) -> ExtensionGroups | None:
        return self._entries.get((base_dir, include_tests))

    def set(self, base_dir: str, include_tests: bool, groups: ExtensionGroups) -> None:
        self._entries[(base_dir, include_tests)] = groups

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
