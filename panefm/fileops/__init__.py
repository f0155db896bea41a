"""Filesystem mutation engines that run on background worker threads.

- ``selection``: the pending Path Set and Operation Kind
- ``progress``: progress channel, worker handle, aggregate report
- ``paste``: copy / move with rename-or-copy fallback
- ``delete``: recursive removal with per-item error capture
- ``rename``: single-entry rename within one directory
"""

from __future__ import annotations

from .selection import OperationKind, PendingOperation, collect_selected_paths
from .progress import OperationHandle, OperationReport, ProgressInfo, ProgressReporter
from .paste import (
    DEFAULT_BUFFER_SIZE,
    PasteOptions,
    copy_items_with_progress,
    move_items_with_progress,
    paste_files,
)
from .delete import delete_files, remove_any, remove_items_with_progress
from .rename import RenameMode, rename_path, validate_new_name

__all__ = [
    "OperationKind",
    "PendingOperation",
    "collect_selected_paths",
    "OperationHandle",
    "OperationReport",
    "ProgressInfo",
    "ProgressReporter",
    "DEFAULT_BUFFER_SIZE",
    "PasteOptions",
    "copy_items_with_progress",
    "move_items_with_progress",
    "paste_files",
    "delete_files",
    "remove_any",
    "remove_items_with_progress",
    "RenameMode",
    "rename_path",
    "validate_new_name",
]
