"""Discovery orchestrator: scans every search root and resolves name collisions."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from extdiscovery.config import Config, resolve_include_tests
from extdiscovery.discovery.cache import FileCache, ScanCache
from extdiscovery.discovery.manifest import ManifestTypeParser
from extdiscovery.discovery.scanner import DirectoryScanner
from extdiscovery.discovery.types import SearchRoot, coerce_search_root
from extdiscovery.errors import ConfigError
from extdiscovery.extension import Extension

logger = logging.getLogger(__name__)

__all__ = [
    "ExtensionDiscovery",
    "ORIGIN_SITES_ALL",
    "DEFAULT_SEARCH_ROOTS",
]

# Origin directory weight: site-wide extension directory.
ORIGIN_SITES_ALL = 0

DEFAULT_SEARCH_ROOTS: tuple[SearchRoot, ...] = (SearchRoot(weight=ORIGIN_SITES_ALL, path="modules/pdb"),)


class ExtensionDiscovery:
    """Discovers available extensions below a root directory.

    Search roots are processed in ascending weight order (declared order for
    equal weights). When two roots provide an extension with the same name,
    the one from the root processed later wins, unless ``process()`` is
    overridden to exclude it.

    To find all modules::

        discovery = ExtensionDiscovery("/var/www/site")
        modules = discovery.scan("module")

    Scan results are memoized per ``(search root, include_tests)`` in a
    :class:`ScanCache` for the lifetime of that cache. Pass the same cache to
    several instances to share one discovery session between them.
    """

    def __init__(
        self,
        root: str | Path,
        search_roots: Iterable[Any] | None = None,
        *,
        file_cache: FileCache | None = None,
        scan_cache: ScanCache | None = None,
        parser: ManifestTypeParser | None = None,
        config: Config | None = None,
        profile_directories: Iterable[str] | None = None,
        follow_symlinks: bool = True,
        detect_symlink_cycles: bool = True,
        excluded_directories: Iterable[str] | None = None,
    ) -> None:
        """Initialize the discovery session.

        Args:
            root: Absolute (or cwd-relative) root all search roots are relative to.
            search_roots: SearchRoot objects, ``(weight, path)`` pairs or
                ``{"weight", "path"}`` mappings. Defaults to ``modules/pdb``.
            file_cache: Optional cache of Extension objects keyed by manifest path.
            scan_cache: Per-root scan memo; a fresh one is created if omitted.
            parser: Manifest type parser; defaults to the line-based parser.
            config: Consulted for ``discovery.scan_tests`` when ``scan()`` is
                called without ``include_tests``.
            profile_directories: Active installation profile directories.
            follow_symlinks: Whether the scanner follows symlinks.
            detect_symlink_cycles: Whether the scanner skips symlink cycles.
            excluded_directories: Directory names never descended into.

        Raises:
            ConfigError: If a search root entry is malformed or a path repeats.
        """
        if search_roots is None:
            search_roots = DEFAULT_SEARCH_ROOTS
        roots = [coerce_search_root(entry) for entry in search_roots]
        seen: set[str] = set()
        for search_root in roots:
            if search_root.path in seen:
                raise ConfigError(message=f"Duplicate search root: '{search_root.path}'")
            seen.add(search_root.path)

        # sorted() is stable, so equal weights keep their declared order.
        self._search_roots: list[SearchRoot] = sorted(roots, key=lambda r: r.weight)
        self._positions: dict[str, int] = {r.path: i for i, r in enumerate(self._search_roots)}
        self._scan_cache = scan_cache if scan_cache is not None else ScanCache()
        self._config = config
        self._profile_directories: list[str] = []
        self.set_profile_directories(profile_directories or [])
        self._scanner = DirectoryScanner(
            root,
            parser=parser,
            file_cache=file_cache,
            follow_symlinks=follow_symlinks,
            detect_symlink_cycles=detect_symlink_cycles,
            excluded_directories=excluded_directories,
        )

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> ExtensionDiscovery:
        """Build a discovery session from the ``discovery`` config section.

        Keyword arguments override the corresponding settings. A relative
        ``discovery.root`` is resolved against the directory of the file the
        config was loaded from, or against the working directory when the
        config was built in memory.

        Raises:
            ConfigError: If the settings are invalid.
        """
        settings = config.discovery_settings()
        options: dict[str, Any] = {
            "search_roots": [(r.weight, r.path) for r in settings.search_roots],
            "config": config,
            "profile_directories": settings.profile_directories,
            "follow_symlinks": settings.follow_symlinks,
            "detect_symlink_cycles": settings.detect_symlink_cycles,
            "excluded_directories": settings.excluded_directories,
        }
        options.update(kwargs)
        root = options.pop("root", None)
        if root is None:
            root = settings.root
            if config.source_path is not None and not os.path.isabs(root):
                root = os.path.join(os.path.dirname(os.path.abspath(config.source_path)), root)
        return cls(root, **options)

    @property
    def root(self) -> str:
        return self._scanner.root

    @property
    def search_roots(self) -> list[SearchRoot]:
        """Search roots in processing order."""
        return list(self._search_roots)

    @property
    def scan_cache(self) -> ScanCache:
        return self._scan_cache

    def get_profile_directories(self) -> list[str]:
        return list(self._profile_directories)

    def set_profile_directories(self, paths: Iterable[str]) -> ExtensionDiscovery:
        """Set the active installation profile directories (relative to root)."""
        self._profile_directories = [p.rstrip("/") for p in paths]
        return self

    def reset(self) -> None:
        """Forget memoized scans so the next ``scan()`` reads the filesystem again."""
        self._scan_cache.clear()

    def origin_weights(self) -> dict[str, int]:
        """Map each search root path to its weight."""
        return {r.path: r.weight for r in self._search_roots}

    def scan(self, type: str, include_tests: bool | None = None) -> dict[str, Extension]:
        """Discover available extensions of a given type.

        Args:
            type: Extension type to return, e.g. ``module`` or ``theme``. An
                unknown type yields an empty result.
            include_tests: Explicitly include or exclude extensions below
                ``tests`` directories. When None, the config's
                ``discovery.scan_tests`` or the ``EXTDISCOVERY_SCAN_TESTS``
                environment variable decides.

        Returns:
            Extensions keyed by extension name. Extensions found in roots
            processed later take precedence over earlier ones.
        """
        if include_tests is None:
            include_tests = resolve_include_tests(self._config)
        include_tests = bool(include_tests)

        files: dict[str, Extension] = {}
        for search_root in self._search_roots:
            groups = self._scan_cache.get(search_root.path, include_tests)
            if groups is None:
                groups = self._scanner.scan(search_root.path, include_tests)
                self._scan_cache.set(search_root.path, include_tests, groups)
            else:
                logger.debug("Reusing scan of '%s' (include_tests=%s)", search_root.path, include_tests)
            # Keyed by manifest path; name collisions are resolved below.
            files.update(groups.get(type, {}))

        if type != "profile":
            files = self.filter_by_profile_directories(files)

        files = self.sort(files, self.origin_weights())
        result = self.process(files)
        logger.info("Discovered %d extension(s) of type '%s'", len(result), type)
        return result

    def filter_by_profile_directories(self, files: dict[str, Extension]) -> dict[str, Extension]:
        """Drop extensions that belong to installation profiles that are not active.

        Does nothing when no profile directories are set.
        """
        if not self._profile_directories:
            return files
        return {
            key: extension
            for key, extension in files.items()
            if not extension.subpath.startswith("profiles") or self._profile_index(extension) is not None
        }

    def sort(self, files: dict[str, Extension], origin_weights: dict[str, int]) -> dict[str, Extension]:
        """Order extensions by the weight of the search root they came from.

        The root always decides first. Within one root, extensions inside an
        installation profile come after the rest, ordered by their profile's
        position in the profile directories. Remaining ties fall back to
        sub-path and manifest path, so the order never depends on filesystem
        iteration order.
        """

        def _sort_key(item: tuple[str, Extension]) -> tuple[int, int, int, str, str]:
            key, extension = item
            weight = origin_weights.get(extension.origin, 0)
            position = self._positions.get(extension.origin, 0)
            profile = -1
            if extension.subpath.startswith("profiles"):
                if not self._profile_directories:
                    profile = 0
                else:
                    index = self._profile_index(extension)
                    if index is not None:
                        profile = index
            return (weight, position, profile, extension.subpath, key)

        return dict(sorted(files.items(), key=_sort_key))

    def process(self, files: dict[str, Extension]) -> dict[str, Extension]:
        """Key the sorted extensions by name.

        Extensions later in ``files`` replace earlier ones with the same name.
        Override to exclude extensions, e.g. ones incompatible with the host.
        """
        result: dict[str, Extension] = {}
        for extension in files.values():
            result[extension.get_name()] = extension
        return result

    def _profile_index(self, extension: Extension) -> int | None:
        path = extension.get_path()
        for index, profile_path in enumerate(self._profile_directories):
            if path == profile_path or path.startswith(profile_path + "/"):
                return index
        return None
