"""Tab state: one independent navigation context with its own history cache."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from ..directory_model import DirectoryHistory, DirectorySnapshot
from .navigation import DirectoryJumpHistory


@dataclass
class Tab:
    """Current path plus the three displayed snapshots.

    A snapshot is either displayed here or checked into ``history``, never
    both.
    """

    curr_path: Path
    history: DirectoryHistory = field(default_factory=DirectoryHistory)
    jumps: DirectoryJumpHistory = field(default_factory=DirectoryJumpHistory)
    curr_list: DirectorySnapshot | None = None
    parent_list: DirectorySnapshot | None = None
    preview_list: DirectorySnapshot | None = None
    load_errors: list[str] = field(default_factory=list)

    def displayed(self) -> Iterator[DirectorySnapshot]:
        for snapshot in (self.parent_list, self.curr_list, self.preview_list):
            if snapshot is not None:
                yield snapshot

    def take_displayed(self, path: Path) -> tuple[str | None, DirectorySnapshot | None]:
        """Detach the displayed snapshot for ``path``; return ``(slot, snapshot)``."""
        for slot in ("curr_list", "parent_list", "preview_list"):
            snapshot = getattr(self, slot)
            if snapshot is not None and snapshot.path == path:
                setattr(self, slot, None)
                return slot, snapshot
        return None, None

    def check_in_all(self) -> None:
        """Return every displayed snapshot to the history cache."""
        for slot in ("curr_list", "parent_list", "preview_list"):
            self.history.put_back(getattr(self, slot))
            setattr(self, slot, None)


__all__ = ["Tab"]
