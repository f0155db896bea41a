"""Sort rules used to order directory listings.

A ``SortRule`` also carries hidden-file visibility, so any change to what a
listing would contain is a rule mismatch for the history cache.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .types import DirectoryItem

_DIGIT_RUN = re.compile(r"(\d+)")


class SortMethod(str, Enum):
    NATURAL = "natural"
    LEXICAL = "lexical"
    MTIME = "mtime"
    SIZE = "size"

    @classmethod
    def parse(cls, value: object, default: SortMethod | None = None) -> SortMethod:
        """Return the method named by ``value`` or ``default`` (natural) when invalid."""
        fallback = default if default is not None else cls.NATURAL
        if not isinstance(value, str):
            return fallback
        try:
            return cls(value.strip().lower())
        except ValueError:
            return fallback


def natural_key(name: str) -> tuple[tuple[int, int | str], ...]:
    """Split ``name`` into text/number chunks so ``file2`` sorts before ``file10``."""
    parts: list[tuple[int, int | str]] = []
    for chunk in _DIGIT_RUN.split(name):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk)))
        else:
            parts.append((1, chunk))
    return tuple(parts)


@dataclass(frozen=True)
class SortRule:
    """How to filter and order one directory listing."""

    method: SortMethod = SortMethod.NATURAL
    directories_first: bool = True
    reverse: bool = False
    case_sensitive: bool = False
    show_hidden: bool = False

    def _name(self, item: DirectoryItem) -> str:
        return item.name if self.case_sensitive else item.name.lower()

    def _key(self, item: DirectoryItem) -> tuple:
        name = self._name(item)
        if self.method is SortMethod.NATURAL:
            return (natural_key(name), item.name)
        if self.method is SortMethod.MTIME:
            return (-(item.metadata.mtime_ns or 0), name)
        if self.method is SortMethod.SIZE:
            return (-item.metadata.size, name)
        return (name, item.name)

    def visible(self, item: DirectoryItem) -> bool:
        return self.show_hidden or not item.is_hidden

    def apply(self, items: list[DirectoryItem]) -> list[DirectoryItem]:
        """Return visible ``items`` ordered by this rule.

        ``reverse`` flips the order inside the directory and file groups but
        keeps directories ahead of files when ``directories_first`` is set.
        """
        visible = [item for item in items if self.visible(item)]
        ordered = sorted(visible, key=self._key, reverse=self.reverse)
        if not self.directories_first:
            return ordered
        directories = [item for item in ordered if item.is_dir]
        files = [item for item in ordered if not item.is_dir]
        return directories + files


__all__ = [
    "SortMethod",
    "SortRule",
    "natural_key",
]
