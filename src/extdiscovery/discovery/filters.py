"""Traversal filter deciding which directory entries discovery looks at."""

from __future__ import annotations

from collections.abc import Iterable

from extdiscovery.discovery.manifest import MANIFEST_SUFFIX

__all__ = ["DEFAULT_EXCLUDED_DIRECTORIES", "ExtensionFilter"]

# Directories that never contain extensions but may contain a lot of files.
DEFAULT_EXCLUDED_DIRECTORIES = frozenset(
    {
        "src",
        "lib",
        "vendor",
        "assets",
        "css",
        "files",
        "images",
        "js",
        "misc",
        "templates",
        "includes",
        "fixtures",
        "Drupal",
        "node_modules",
    }
)


class ExtensionFilter:
    """Prunes non-extension subtrees and admits only manifest files.

    A rejected directory is never entered, so everything beneath it is
    excluded as well. With ``accept_tests`` off this removes every
    extension that lives under a ``tests`` directory.
    """

    def __init__(
        self,
        accept_tests: bool = False,
        excluded_directories: Iterable[str] | None = None,
    ) -> None:
        self.accept_tests = accept_tests
        self.excluded_directories = frozenset(
            DEFAULT_EXCLUDED_DIRECTORIES if excluded_directories is None else excluded_directories
        )

    def accept_directory(self, name: str, subpath: str = "") -> bool:
        """Whether to descend into directory ``name``.

        Args:
            name: Directory base name.
            subpath: ``/``-separated path of the directory relative to the
                discovery root, including ``name``.
        """
        if name.startswith("."):
            return False
        if name in self.excluded_directories:
            return False
        if name == "config":
            # Only the config extension's own directory; config/ subdirectories hold YAML, not extensions.
            return subpath.endswith("modules/config")
        if not self.accept_tests and name == "tests":
            return False
        return True

    def accept_file(self, name: str) -> bool:
        if name.startswith("."):
            return False
        return name.endswith(MANIFEST_SUFFIX)
