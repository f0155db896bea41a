"""Pending cut/copy state shared between the UI thread and paste workers."""

from __future__ import annotations

import threading
from enum import Enum
from pathlib import Path

from ..directory_model import DirectorySnapshot


class OperationKind(Enum):
    CUT = "cut"
    COPY = "copy"


def collect_selected_paths(snapshot: DirectorySnapshot | None) -> list[Path] | None:
    """Return selected paths, else the cursor path, else ``None``."""
    if snapshot is None:
        return None
    selected = snapshot.selected_paths()
    if selected:
        return selected
    entry = snapshot.get_curr_entry()
    if entry is None:
        return None
    return [entry.path]


class PendingOperation:
    """Path Set plus Operation Kind awaiting a paste.

    Both cells sit behind one lock. ``generation`` increases on every
    successful mark so a finishing worker only clears the set it consumed.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._paths: list[Path] = []
        self._kind = OperationKind.COPY
        self._generation = 0

    @property
    def kind(self) -> OperationKind:
        with self._lock:
            return self._kind

    @property
    def paths(self) -> list[Path]:
        with self._lock:
            return list(self._paths)

    def is_empty(self) -> bool:
        with self._lock:
            return not self._paths

    def _repopulate(self, snapshot: DirectorySnapshot | None) -> bool:
        paths = collect_selected_paths(snapshot)
        if paths is None:
            return False
        with self._lock:
            self._paths = list(dict.fromkeys(paths))
            self._generation += 1
        return True

    def _set_kind(self, kind: OperationKind) -> None:
        with self._lock:
            self._kind = kind

    def mark_for_cut(self, snapshot: DirectorySnapshot | None) -> bool:
        if not self._repopulate(snapshot):
            return False
        self._set_kind(OperationKind.CUT)
        return True

    def mark_for_copy(self, snapshot: DirectorySnapshot | None) -> bool:
        if not self._repopulate(snapshot):
            return False
        self._set_kind(OperationKind.COPY)
        return True

    def checkout(self) -> tuple[list[Path], OperationKind, int]:
        """Return ``(paths, kind, generation)`` read under one lock acquisition."""
        with self._lock:
            return list(self._paths), self._kind, self._generation

    def clear(self, generation: int | None = None) -> bool:
        """Empty the Path Set unless a newer mark replaced ``generation``."""
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            self._paths = []
            return True


__all__ = [
    "OperationKind",
    "PendingOperation",
    "collect_selected_paths",
]
