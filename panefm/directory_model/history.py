"""Per-tab cache of directory snapshots keyed by absolute path.

Snapshots are checked out with ``pop_or_create`` while a pane displays them
and checked back in with ``put_back`` when the pane stops displaying them, so
cursor and selection state survive navigation. The cache has no capacity
bound; entries leave only through ``pop_or_create`` or ``invalidate``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

from .snapshot import DirectorySnapshot, build_directory_snapshot
from .sorting import SortRule

logger = logging.getLogger(__name__)

SnapshotBuilder = Callable[[Path, SortRule], DirectorySnapshot]


class DirectoryHistory:
    """Owning map from directory path to its last checked-in snapshot."""

    def __init__(self, build_snapshot: SnapshotBuilder = build_directory_snapshot) -> None:
        self._build_snapshot = build_snapshot
        self._snapshots: dict[Path, DirectorySnapshot] = {}

    def __contains__(self, path: object) -> bool:
        return path in self._snapshots

    def __len__(self) -> int:
        return len(self._snapshots)

    def __iter__(self) -> Iterator[Path]:
        return iter(list(self._snapshots))

    def get(self, path: Path) -> DirectorySnapshot | None:
        """Peek at a cached snapshot without checking it out."""
        return self._snapshots.get(path)

    def pop_or_create(self, path: Path, sort_rule: SortRule) -> DirectorySnapshot:
        """Check out the cached snapshot for ``path`` or read a fresh one.

        A cached snapshot built with a different ``sort_rule`` is discarded,
        never returned. ``DirectoryReadError`` propagates when a fresh read
        fails; the cache is left without an entry for ``path`` in that case.
        """
        cached = self._snapshots.pop(path, None)
        if cached is not None:
            if cached.sort_rule == sort_rule:
                return cached
            logger.debug("HISTORY | sort rule changed, rebuilding %s", path)
        return self._build_snapshot(path, sort_rule)

    def put_back(self, snapshot: DirectorySnapshot | None) -> None:
        """Check ``snapshot`` in, replacing any entry for the same path."""
        if snapshot is None:
            return
        self._snapshots[snapshot.path] = snapshot

    def invalidate(self, path: Path, recursive: bool = False) -> int:
        """Drop the entry for ``path`` (and descendants when ``recursive``).

        Returns the number of dropped snapshots.
        """
        if not recursive:
            return 1 if self._snapshots.pop(path, None) is not None else 0
        doomed = [cached for cached in self._snapshots if cached == path or cached.is_relative_to(path)]
        for cached in doomed:
            del self._snapshots[cached]
        return len(doomed)


__all__ = [
    "DirectoryHistory",
    "SnapshotBuilder",
]
