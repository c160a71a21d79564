"""Directory scanner for discovering extension manifests under one base directory."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from extdiscovery.discovery.cache import FileCache
from extdiscovery.discovery.filters import ExtensionFilter
from extdiscovery.discovery.manifest import LineTypeParser, ManifestTypeParser, extension_name
from extdiscovery.discovery.types import ExtensionGroups
from extdiscovery.extension import Extension

logger = logging.getLogger(__name__)

__all__ = ["DirectoryScanner"]


class DirectoryScanner:
    """Recursively scans base directories below a fixed root for extensions.

    Symlinks are followed so extensions can be linked in from elsewhere.
    With ``detect_symlink_cycles`` on, a directory whose real path is already
    on the current descent chain is skipped instead of recursed into.
    """

    def __init__(
        self,
        root: str | Path,
        parser: ManifestTypeParser | None = None,
        file_cache: FileCache | None = None,
        follow_symlinks: bool = True,
        detect_symlink_cycles: bool = True,
        excluded_directories: Iterable[str] | None = None,
    ) -> None:
        self.root = os.path.abspath(root)
        self.parser: ManifestTypeParser = parser if parser is not None else LineTypeParser()
        self.file_cache = file_cache
        self.follow_symlinks = follow_symlinks
        self.detect_symlink_cycles = detect_symlink_cycles
        self._excluded_directories = excluded_directories

    def scan(self, base_dir: str, include_tests: bool) -> ExtensionGroups:
        """Scan ``base_dir`` for extensions of every type.

        Args:
            base_dir: Directory relative to the root, without trailing slash.
                An empty string scans the root itself.
            include_tests: Whether to descend into ``tests`` directories.

        Returns:
            Mapping of extension type to ``{absolute manifest path: Extension}``.
            Empty if ``base_dir`` does not exist.
        """
        base_dir = base_dir.strip("/")
        dir_prefix = f"{base_dir}/" if base_dir else ""
        absolute_dir = os.path.join(self.root, base_dir) if base_dir else self.root

        results: ExtensionGroups = {}
        if not os.path.isdir(absolute_dir):
            logger.debug("Base directory %s does not exist, nothing to scan", absolute_dir)
            return results

        ext_filter = ExtensionFilter(
            accept_tests=include_tests,
            excluded_directories=self._excluded_directories,
        )

        def _add(extension: Extension, key: str) -> None:
            results.setdefault(extension.type, {})[key] = extension

        def _inspect(file_path: str, name: str, sub_dir: str) -> None:
            key = file_path.replace(os.sep, "/")

            if self.file_cache is not None:
                cached = self.file_cache.lookup(key)
                if cached is not None:
                    logger.debug("File cache hit for %s", key)
                    _add(cached, key)
                    return

            ext_type = self.parser.detect_type(Path(file_path))
            if not ext_type:
                logger.debug("No type declared in %s, skipping", key)
                return

            ext_name = extension_name(name)
            sub_pathname = f"{sub_dir}/{name}" if sub_dir else name

            filename: str | None = f"{ext_name}.{ext_type}"
            if not os.path.exists(os.path.join(os.path.dirname(file_path), filename)):
                filename = None

            extension = Extension(self.root, ext_type, dir_prefix + sub_pathname, filename)
            extension.subpath = sub_dir
            extension.origin = base_dir
            _add(extension, key)

            if self.file_cache is not None:
                self.file_cache.store(key, extension)

        def _scan_dir(dir_path: str, sub_dir: str, chain: frozenset[str]) -> None:
            try:
                with os.scandir(dir_path) as it:
                    entries = sorted(it, key=lambda e: e.name)
            except PermissionError as e:
                logger.error("Permission denied scanning %s: %s", dir_path, e)
                return
            except OSError as e:
                logger.error("OS error scanning %s: %s", dir_path, e)
                return

            for entry in entries:
                name = entry.name
                try:
                    is_dir = entry.is_dir(follow_symlinks=self.follow_symlinks)
                    is_file = entry.is_file(follow_symlinks=self.follow_symlinks)
                except OSError as e:
                    logger.error("OS error accessing %s: %s", entry.path, e)
                    continue

                sub_pathname = f"{sub_dir}/{name}" if sub_dir else name

                if is_dir:
                    if not ext_filter.accept_directory(name, dir_prefix + sub_pathname):
                        continue
                    next_chain = chain
                    if self.detect_symlink_cycles:
                        real = os.path.realpath(entry.path)
                        if real in chain:
                            logger.warning(
                                "Symlink cycle detected at %s -> %s, skipping",
                                entry.path,
                                real,
                            )
                            continue
                        next_chain = chain | {real}
                    _scan_dir(entry.path, sub_pathname, next_chain)
                elif is_file and ext_filter.accept_file(name):
                    _inspect(entry.path, name, sub_dir)

        _scan_dir(absolute_dir, "", frozenset({os.path.realpath(absolute_dir)}))

        logger.info(
            "Scanned %s: %d extension(s) of %d type(s)",
            absolute_dir,
            sum(len(group) for group in results.values()),
            len(results),
        )
        return results
