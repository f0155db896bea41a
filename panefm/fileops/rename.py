"""Rename engine: validate a new name and rename within the same parent."""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path

from ..errors import RenameError

logger = logging.getLogger(__name__)


class RenameMode(Enum):
    """Where the prompt cursor starts relative to the existing name."""

    APPEND = "append"
    PREPEND = "prepend"
    OVERWRITE = "overwrite"


def validate_new_name(new_name: str) -> str:
    """Return ``new_name`` if it names a single entry, else raise ``RenameError``."""
    if not new_name:
        raise RenameError("Name must not be empty")
    if new_name in {".", ".."}:
        raise RenameError(f"Invalid name: {new_name}")
    if os.sep in new_name or (os.altsep and os.altsep in new_name) or "\0" in new_name:
        raise RenameError(f"Name must not contain a path separator: {new_name}")
    return new_name


def rename_path(path: Path, new_name: str) -> Path:
    """Rename ``path`` to ``parent(path) / new_name`` and return the new path.

    Nothing on disk changes when validation fails or the target exists.
    """
    validate_new_name(new_name)
    target = path.parent / new_name
    if target == path:
        return path
    if os.path.lexists(target):
        # Case-only renames on case-insensitive filesystems resolve to ``path``.
        try:
            same = os.path.samefile(path, target)
        except OSError:
            same = False
        if not same:
            raise RenameError(f"File exists: {new_name}")
    logger.info("RENAME | %s -> %s", path, target)
    try:
        os.rename(path, target)
    except OSError as exc:
        raise RenameError(exc.strerror or str(exc)) from exc
    return target


__all__ = [
    "RenameMode",
    "validate_new_name",
    "rename_path",
]
