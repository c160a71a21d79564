"""Shared pytest fixtures for the extdiscovery test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from extdiscovery.config import SCAN_TESTS_ENV_VAR
from extdiscovery.discovery.cache import MemoryFileCache
from extdiscovery.discovery.manifest import LineTypeParser
from extdiscovery.extension import Extension


# === Counting collaborators ===


class CountingFileCache(MemoryFileCache):
    """MemoryFileCache that records lookups, hits and stores."""

    def __init__(self) -> None:
        super().__init__()
        self.lookups: list[str] = []
        self.hits: list[str] = []
        self.stores: list[str] = []

    def lookup(self, path: str) -> Extension | None:
        self.lookups.append(path)
        extension = super().lookup(path)
        if extension is not None:
            self.hits.append(path)
        return extension

    def store(self, path: str, extension: Extension) -> None:
        self.stores.append(path)
        super().store(path, extension)


class CountingParser(LineTypeParser):
    """LineTypeParser that records every manifest it reads."""

    def __init__(self) -> None:
        super().__init__()
        self.reads: list[Path] = []

    def detect_type(self, path: Path) -> str | None:
        self.reads.append(path)
        return super().detect_type(path)


# === Fixtures ===


@pytest.fixture(autouse=True)
def _no_scan_tests_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the environment signal out of tests unless a test sets it."""
    monkeypatch.delenv(SCAN_TESTS_ENV_VAR, raising=False)


@pytest.fixture
def make_extension() -> Callable[..., Path]:
    """Return a helper that writes ``<dir>/<name>.info.yml`` below a root.

    The helper signature is ``(root, rel_dir, name, content="type: module\\n",
    companion=None)``; ``companion`` names a file created next to the manifest.
    """

    def _make(
        root: Path,
        rel_dir: str,
        name: str,
        content: str = "type: module\n",
        companion: str | None = None,
    ) -> Path:
        directory = root / rel_dir
        directory.mkdir(parents=True, exist_ok=True)
        manifest = directory / f"{name}.info.yml"
        manifest.write_text(content, encoding="utf-8")
        if companion is not None:
            (directory / companion).write_text("", encoding="utf-8")
        return manifest

    return _make


@pytest.fixture
def counting_file_cache() -> CountingFileCache:
    return CountingFileCache()


@pytest.fixture
def counting_parser() -> CountingParser:
    return CountingParser()
