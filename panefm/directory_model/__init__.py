"""Domain model for directory listings and their per-tab history cache.

This package contains non-UI primitives:
- listing entry datatypes with metadata and selection flags
- filesystem scanning and sort rules
- snapshots carrying cursor/selection state
- the check-out/check-in history cache
"""

from __future__ import annotations

from .types import DirectoryItem, EntryMetadata
from .fs import read_directory_items, read_entry_metadata, safe_mtime_ns
from .sorting import SortMethod, SortRule, natural_key
from .snapshot import DirectorySnapshot, build_directory_snapshot, reload_snapshot
from .history import DirectoryHistory

__all__ = [
    "DirectoryItem",
    "EntryMetadata",
    "read_directory_items",
    "read_entry_metadata",
    "safe_mtime_ns",
    "SortMethod",
    "SortRule",
    "natural_key",
    "DirectorySnapshot",
    "build_directory_snapshot",
    "reload_snapshot",
    "DirectoryHistory",
]
