"""Directory snapshots: one sorted listing plus cursor and selection state."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..errors import DirectoryReadError
from .fs import read_directory_items
from .sorting import SortRule
from .types import DirectoryItem


@dataclass
class DirectorySnapshot:
    """Point-in-time listing of ``path`` ordered by ``sort_rule``.

    ``index`` is ``None`` exactly when ``entries`` is empty and is otherwise
    kept inside ``range(len(entries))`` by every mutator.
    """

    path: Path
    sort_rule: SortRule
    entries: list[DirectoryItem] = field(default_factory=list)
    index: int | None = None
    mtime_ns: int | None = None

    def __post_init__(self) -> None:
        self._clamp_index()

    def _clamp_index(self) -> None:
        if not self.entries:
            self.index = None
            return
        if self.index is None:
            self.index = 0
            return
        self.index = max(0, min(self.index, len(self.entries) - 1))

    def __len__(self) -> int:
        return len(self.entries)

    def is_empty(self) -> bool:
        return not self.entries

    def get_curr_entry(self) -> DirectoryItem | None:
        if self.index is None:
            return None
        return self.entries[self.index]

    def set_index(self, index: int) -> None:
        """Move the cursor to ``index`` clamped into range."""
        if not self.entries:
            self.index = None
            return
        self.index = max(0, min(index, len(self.entries) - 1))

    def move_cursor(self, delta: int) -> bool:
        """Move the cursor by ``delta`` rows; return whether it moved."""
        if self.index is None:
            return False
        previous = self.index
        self.set_index(previous + delta)
        return self.index != previous

    def index_of(self, path: Path) -> int | None:
        for idx, entry in enumerate(self.entries):
            if entry.path == path:
                return idx
        return None

    def focus(self, path: Path) -> bool:
        """Place the cursor on ``path`` if it is listed."""
        idx = self.index_of(path)
        if idx is None:
            return False
        self.index = idx
        return True

    def toggle_selected(self) -> bool:
        """Flip the selection flag of the cursor entry."""
        entry = self.get_curr_entry()
        if entry is None:
            return False
        entry.selected = not entry.selected
        return True

    def select_all(self) -> None:
        for entry in self.entries:
            entry.selected = True

    def clear_selection(self) -> None:
        for entry in self.entries:
            entry.selected = False

    def selected_entries(self) -> list[DirectoryItem]:
        return [entry for entry in self.entries if entry.selected]

    def selected_paths(self) -> list[Path]:
        return [entry.path for entry in self.entries if entry.selected]


def build_directory_snapshot(path: Path, sort_rule: SortRule) -> DirectorySnapshot:
    """Read ``path`` synchronously and build a fresh snapshot.

    Raises ``DirectoryReadError`` when the directory cannot be listed.
    """
    try:
        items, mtime_ns = read_directory_items(path)
    except OSError as exc:
        raise DirectoryReadError(path, exc.strerror or str(exc)) from exc
    return DirectorySnapshot(
        path=path,
        sort_rule=sort_rule,
        entries=sort_rule.apply(items),
        index=0,
        mtime_ns=mtime_ns,
    )


def reload_snapshot(previous: DirectorySnapshot, sort_rule: SortRule | None = None) -> DirectorySnapshot:
    """Re-read ``previous.path`` keeping cursor and selection where possible.

    Selection flags survive for paths still present. The cursor stays on the
    same path when it survives, otherwise on the same row clamped into range.
    """
    refreshed = build_directory_snapshot(previous.path, sort_rule or previous.sort_rule)
    selected = set(previous.selected_paths())
    for entry in refreshed.entries:
        entry.selected = entry.path in selected

    current = previous.get_curr_entry()
    if current is not None and refreshed.focus(current.path):
        return refreshed
    if previous.index is not None:
        refreshed.set_index(previous.index)
    return refreshed


__all__ = [
    "DirectorySnapshot",
    "build_directory_snapshot",
    "reload_snapshot",
]
