"""The Extension descriptor produced by discovery."""

from __future__ import annotations

import posixpath
from typing import Any

__all__ = ["Extension", "MANIFEST_SUFFIX", "extension_name"]

MANIFEST_SUFFIX = ".info.yml"


def extension_name(filename: str) -> str:
    """Strip the manifest suffix from a manifest file name."""
    if filename.endswith(MANIFEST_SUFFIX):
        return filename[: -len(MANIFEST_SUFFIX)]
    return filename


class Extension:
    """A discovered extension: one manifest file and its optional companion file.

    Attributes:
        root: Absolute filesystem root that ``pathname`` is relative to.
        type: Extension type declared by the manifest (e.g. ``module``, ``theme``).
        pathname: Manifest path relative to ``root``, always ``/``-separated.
        filename: Companion implementation file name (``<name>.<type>``) or None.
        subpath: Directory of the manifest relative to the scanned base directory.
        origin: Base directory the extension was discovered under.
    """

    def __init__(
        self,
        root: str,
        type: str,
        pathname: str,
        filename: str | None = None,
    ) -> None:
        self.root = root
        self.type = type
        self.pathname = pathname.replace("\\", "/")
        self.filename = filename
        self.subpath: str = ""
        self.origin: str = ""

    def get_type(self) -> str:
        return self.type

    def get_name(self) -> str:
        """Extension name: the manifest basename without ``.info.yml``."""
        return extension_name(self.get_filename())

    def get_path(self) -> str:
        return posixpath.dirname(self.pathname)

    def get_pathname(self) -> str:
        return self.pathname

    def get_filename(self) -> str:
        return posixpath.basename(self.pathname)

    def get_extension_filename(self) -> str | None:
        return self.filename

    def get_extension_pathname(self) -> str | None:
        """Relative path of the companion implementation file, if there is one."""
        if not self.filename:
            return None
        return f"{self.get_path()}/{self.filename}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.get_name(),
            "type": self.type,
            "pathname": self.pathname,
            "filename": self.filename,
            "subpath": self.subpath,
            "origin": self.origin,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Extension):
            return NotImplemented
        return self.root == other.root and self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash((self.root, self.pathname))

    def __repr__(self) -> str:
        return f"Extension(type={self.type!r}, pathname={self.pathname!r}, origin={self.origin!r})"
