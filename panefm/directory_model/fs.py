"""Filesystem scanning for directory listings."""

from __future__ import annotations

import os
import stat
from pathlib import Path

from .types import DirectoryItem, EntryMetadata


def safe_mtime_ns(path: Path) -> int | None:
    """Return ``st_mtime_ns`` for ``path`` or ``None`` on stat failure."""
    try:
        return int(path.stat().st_mtime_ns)
    except OSError:
        return None


def read_entry_metadata(path: Path) -> EntryMetadata:
    """Stat ``path`` without following symlinks.

    Symlinks pointing at directories are reported as directories so they can be
    entered, while ``is_symlink`` still records the link itself.
    """
    st = os.lstat(path)
    is_symlink = stat.S_ISLNK(st.st_mode)
    is_dir = stat.S_ISDIR(st.st_mode)
    if is_symlink:
        try:
            is_dir = path.is_dir()
        except OSError:
            is_dir = False
    return EntryMetadata(
        is_dir=is_dir,
        is_symlink=is_symlink,
        size=0 if is_dir else int(st.st_size),
        mtime_ns=int(st.st_mtime_ns),
        mode=int(st.st_mode),
    )


def read_directory_items(directory: Path) -> tuple[list[DirectoryItem], int | None]:
    """List every child of ``directory`` in scan order.

    Returns ``(items, directory_mtime_ns)``. Children that vanish between the
    scan and the stat are skipped. ``OSError`` from opening the directory
    itself propagates to the caller.
    """
    directory_mtime_ns = safe_mtime_ns(directory)
    items: list[DirectoryItem] = []
    with os.scandir(directory) as entries:
        for child in entries:
            child_path = Path(child.path)
            try:
                metadata = read_entry_metadata(child_path)
            except OSError:
                continue
            items.append(DirectoryItem(path=child_path, name=child.name, metadata=metadata))
    return items, directory_mtime_ns


__all__ = [
    "safe_mtime_ns",
    "read_entry_metadata",
    "read_directory_items",
]
