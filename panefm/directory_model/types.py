"""Domain datatypes for directory listing entries."""

from __future__ import annotations

import stat
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class EntryMetadata:
    """Metadata observed from one ``lstat`` call."""

    is_dir: bool
    is_symlink: bool = False
    size: int = 0
    mtime_ns: int | None = None
    mode: int = 0

    @property
    def permissions(self) -> str:
        """Return an ``ls``-style permission string such as ``drwxr-xr-x``."""
        return stat.filemode(self.mode) if self.mode else "?---------"


@dataclass
class DirectoryItem:
    """One listing row: immutable path/metadata plus the mutable selection flag."""

    path: Path
    name: str
    metadata: EntryMetadata
    selected: bool = False

    @property
    def is_dir(self) -> bool:
        return self.metadata.is_dir

    @property
    def is_hidden(self) -> bool:
        return self.name.startswith(".")


__all__ = [
    "EntryMetadata",
    "DirectoryItem",
]
