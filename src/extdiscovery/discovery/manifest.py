"""Manifest type detection.

A manifest (``<name>.info.yml``) marks a directory as containing an
extension. Discovery only needs the ``type`` it declares, so the parsers
here answer a single question: which type does this manifest declare, if
any. Alternative manifest formats plug in by implementing
:class:`ManifestTypeParser`.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Protocol, runtime_checkable

import yaml

from extdiscovery.extension import MANIFEST_SUFFIX, extension_name

logger = logging.getLogger(__name__)

__all__ = [
    "MANIFEST_SUFFIX",
    "TYPE_LINE_PATTERN",
    "ManifestTypeParser",
    "LineTypeParser",
    "YamlTypeParser",
    "extension_name",
]

TYPE_LINE_PATTERN = re.compile(r"""^type:\s*(['"]?)(\w+)\1?\s*$""")

_TYPE_VALUE_PATTERN = re.compile(r"^\w+$")


@runtime_checkable
class ManifestTypeParser(Protocol):
    """Detects the extension type declared by a manifest file."""

    def detect_type(self, path: Path) -> str | None: ...


class LineTypeParser:
    """Scan a manifest line by line for the first ``type: <word>`` line.

    Reading stops at the first match, so later ``type:`` lines in a
    malformed manifest are never seen. Bytes that are not valid UTF-8 are
    replaced rather than rejected; only the ``type`` line has to be readable.
    """

    def __init__(self, pattern: re.Pattern[str] = TYPE_LINE_PATTERN) -> None:
        self._pattern = pattern

    def detect_type(self, path: Path) -> str | None:
        try:
            with open(path, encoding="utf-8", errors="replace") as f:
                for line in f:
                    match = self._pattern.match(line)
                    if match:
                        return match.group(2)
        except OSError as e:
            logger.debug("Cannot read manifest %s: %s", path, e)
        return None


class YamlTypeParser:
    """Load the whole manifest as YAML and read its top-level ``type`` key."""

    def detect_type(self, path: Path) -> str | None:
        try:
            with open(path, encoding="utf-8", errors="replace") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            logger.debug("Cannot read manifest %s: %s", path, e)
            return None
        except yaml.YAMLError as e:
            logger.debug("Invalid YAML in manifest %s: %s", path, e)
            return None

        if not isinstance(data, dict):
            return None
        value = data.get("type")
        if isinstance(value, str) and _TYPE_VALUE_PATTERN.match(value):
            return value
        return None

