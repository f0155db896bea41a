"""Navigation controller: move a tab between directories through its cache.

This module intentionally has no UI concerns. Every function changes the
process working directory before committing tab state, so a failed ``chdir``
leaves all three panes exactly as they were.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from ..directory_model import DirectorySnapshot, SortRule, reload_snapshot
from ..errors import DirectoryReadError, NavigationError

if TYPE_CHECKING:
    from .tab import Tab

logger = logging.getLogger(__name__)

MAX_JUMP_HISTORY = 256

ChangeDir = Callable[[Path], None]


class DirectoryJumpHistory:
    """Bounded back/forward stacks of visited directories.

    Adjacent duplicate paths are suppressed to avoid no-op navigation steps.
    """

    def __init__(self, max_entries: int = MAX_JUMP_HISTORY) -> None:
        self.max_entries = max(1, max_entries)
        self.back: list[Path] = []
        self.forward: list[Path] = []

    def _append_unique(self, stack: list[Path], path: Path) -> None:
        if stack and stack[-1] == path:
            return
        stack.append(path)
        overflow = len(stack) - self.max_entries
        if overflow > 0:
            del stack[:overflow]

    def record(self, origin: Path) -> None:
        """Push ``origin`` onto the back stack and clear forward history."""
        self._append_unique(self.back, origin)
        self.forward.clear()

    def go_back(self, current: Path) -> Path | None:
        """Pop next back target and push ``current`` onto the forward stack."""
        while self.back and self.back[-1] == current:
            self.back.pop()
        if not self.back:
            return None
        target = self.back.pop()
        self._append_unique(self.forward, current)
        return target

    def go_forward(self, current: Path) -> Path | None:
        """Pop next forward target and push ``current`` onto the back stack."""
        while self.forward and self.forward[-1] == current:
            self.forward.pop()
        if not self.forward:
            return None
        target = self.forward.pop()
        self._append_unique(self.back, current)
        return target


def _change_dir(path: Path, change_dir: ChangeDir) -> None:
    try:
        change_dir(path)
    except OSError as exc:
        raise NavigationError(f"{path}: {exc.strerror or exc}") from exc


def _checkout(tab: Tab, path: Path, sort_rule: SortRule) -> DirectorySnapshot | None:
    """Pop ``path`` from the cache, recording a read failure on the tab."""
    try:
        return tab.history.pop_or_create(path, sort_rule)
    except DirectoryReadError as exc:
        logger.warning("LIST FAILED | %s", exc)
        tab.load_errors.append(str(exc))
        return None


def _load_parent(tab: Tab, sort_rule: SortRule) -> None:
    parent = tab.curr_path.parent
    if parent == tab.curr_path:
        tab.parent_list = None
        return
    tab.parent_list = _checkout(tab, parent, sort_rule)
    if tab.parent_list is not None:
        tab.parent_list.focus(tab.curr_path)


def refresh_preview(tab: Tab, sort_rule: SortRule) -> None:
    """Point the preview pane at the cursor entry when it is a directory."""
    entry = tab.curr_list.get_curr_entry() if tab.curr_list is not None else None
    target = entry.path if entry is not None and entry.is_dir else None
    preview = tab.preview_list
    if preview is not None and preview.path == target and preview.sort_rule == sort_rule:
        return
    tab.history.put_back(preview)
    tab.preview_list = None
    if target is None:
        return
    try:
        tab.preview_list = tab.history.pop_or_create(target, sort_rule)
    except DirectoryReadError as exc:
        logger.debug("PREVIEW FAILED | %s", exc)


def open_tab(
    tab: Tab,
    sort_rule: SortRule,
    change_dir: ChangeDir = os.chdir,
) -> Tab:
    """Load the three panes of a tab whose ``curr_path`` is set."""
    path = tab.curr_path
    try:
        curr_list = tab.history.pop_or_create(path, sort_rule)
    except DirectoryReadError as exc:
        raise NavigationError(str(exc)) from exc
    try:
        _change_dir(path, change_dir)
    except NavigationError:
        tab.history.put_back(curr_list)
        raise
    tab.load_errors.clear()
    tab.curr_list = curr_list
    _load_parent(tab, sort_rule)
    refresh_preview(tab, sort_rule)
    return tab


def parent_directory(
    tab: Tab,
    sort_rule: SortRule,
    change_dir: ChangeDir = os.chdir,
) -> bool:
    """Move ``tab`` one level up.

    Returns ``False`` at the filesystem root. Raises ``NavigationError`` when
    the parent cannot be entered; the tab is untouched in that case.
    """
    parent = tab.curr_path.parent
    if parent == tab.curr_path:
        return False
    _change_dir(parent, change_dir)

    tab.load_errors.clear()
    previous = tab.curr_path
    tab.jumps.record(previous)
    tab.history.put_back(tab.curr_list)
    tab.history.put_back(tab.preview_list)
    tab.preview_list = None

    new_curr = tab.parent_list
    tab.parent_list = None
    if new_curr is None or new_curr.sort_rule != sort_rule:
        tab.history.put_back(new_curr)
        new_curr = _checkout(tab, parent, sort_rule)
    if new_curr is not None:
        new_curr.focus(previous)

    tab.curr_path = parent
    tab.curr_list = new_curr
    _load_parent(tab, sort_rule)
    refresh_preview(tab, sort_rule)
    return True


def child_directory(
    tab: Tab,
    sort_rule: SortRule,
    change_dir: ChangeDir = os.chdir,
) -> bool:
    """Enter the directory under the cursor.

    Returns ``False`` when the cursor is not on a directory. Raises
    ``NavigationError`` when it cannot be read or entered; the tab is
    untouched in that case.
    """
    entry = tab.curr_list.get_curr_entry() if tab.curr_list is not None else None
    if entry is None or not entry.is_dir:
        return False
    target = entry.path

    preview = tab.preview_list
    from_preview = preview is not None and preview.path == target and preview.sort_rule == sort_rule
    if from_preview:
        new_curr = preview
    else:
        try:
            new_curr = tab.history.pop_or_create(target, sort_rule)
        except DirectoryReadError as exc:
            raise NavigationError(str(exc)) from exc
    try:
        _change_dir(target, change_dir)
    except NavigationError:
        if not from_preview:
            tab.history.put_back(new_curr)
        raise

    tab.load_errors.clear()
    tab.jumps.record(tab.curr_path)
    if not from_preview:
        tab.history.put_back(tab.preview_list)
    tab.preview_list = None
    tab.history.put_back(tab.parent_list)
    tab.parent_list = tab.curr_list
    tab.curr_list = new_curr
    tab.curr_path = target
    refresh_preview(tab, sort_rule)
    return True


def change_directory(
    tab: Tab,
    path: Path,
    sort_rule: SortRule,
    change_dir: ChangeDir = os.chdir,
    *,
    record: bool = True,
) -> bool:
    """Jump ``tab`` to an arbitrary directory, checking every pane back in."""
    path = Path(os.path.abspath(path))
    if path == tab.curr_path:
        return False

    slot, displayed = tab.take_displayed(path)
    try:
        if displayed is None:
            new_curr = tab.history.pop_or_create(path, sort_rule)
        elif displayed.sort_rule == sort_rule:
            new_curr = displayed
        else:
            new_curr = reload_snapshot(displayed, sort_rule)
    except DirectoryReadError as exc:
        if slot is not None:
            setattr(tab, slot, displayed)
        raise NavigationError(str(exc)) from exc
    try:
        _change_dir(path, change_dir)
    except NavigationError:
        if slot is not None:
            setattr(tab, slot, displayed)
        else:
            tab.history.put_back(new_curr)
        raise

    tab.load_errors.clear()
    if record:
        tab.jumps.record(tab.curr_path)
    tab.check_in_all()
    tab.curr_path = path
    tab.curr_list = new_curr
    _load_parent(tab, sort_rule)
    refresh_preview(tab, sort_rule)
    return True


def go_back(tab: Tab, sort_rule: SortRule, change_dir: ChangeDir = os.chdir) -> bool:
    """Jump to the previous directory in the tab's back stack."""
    current = tab.curr_path
    target = tab.jumps.go_back(current)
    if target is None:
        return False
    try:
        return change_directory(tab, target, sort_rule, change_dir, record=False)
    except NavigationError:
        tab.jumps.forward.pop()
        tab.jumps.back.append(target)
        raise


def go_forward(tab: Tab, sort_rule: SortRule, change_dir: ChangeDir = os.chdir) -> bool:
    """Jump to the next directory in the tab's forward stack."""
    current = tab.curr_path
    target = tab.jumps.go_forward(current)
    if target is None:
        return False
    try:
        return change_directory(tab, target, sort_rule, change_dir, record=False)
    except NavigationError:
        tab.jumps.back.pop()
        tab.jumps.forward.append(target)
        raise


def _is_at_or_below(path: Path, roots: Iterable[Path]) -> bool:
    return any(path == root or path.is_relative_to(root) for root in roots)


def reload_tab(
    tab: Tab,
    sort_rule: SortRule,
    affected_dirs: Iterable[Path] | None = None,
    removed_paths: Iterable[Path] = (),
    changed_trees: Iterable[Path] = (),
) -> None:
    """Bring a tab in line with the filesystem after a mutation.

    Cached snapshots at or below ``removed_paths`` and ``changed_trees`` and
    at ``affected_dirs`` are invalidated. Displayed snapshots in
    ``affected_dirs`` or at or below ``changed_trees`` are re-read, keeping
    cursor and selection; with ``affected_dirs=None`` every displayed
    snapshot is re-read, which also applies a changed ``sort_rule``.
    """
    removed = list(removed_paths)
    changed = list(changed_trees)
    affected = None if affected_dirs is None else set(affected_dirs)
    for path in (*removed, *changed):
        tab.history.invalidate(path, recursive=True)
    for path in affected or ():
        tab.history.invalidate(path)

    tab.load_errors.clear()
    for slot in ("curr_list", "parent_list", "preview_list"):
        snapshot: DirectorySnapshot | None = getattr(tab, slot)
        if snapshot is None:
            continue
        if slot == "preview_list" and _is_at_or_below(snapshot.path, removed):
            tab.preview_list = None
            continue
        needs_reload = (
            affected is None
            or snapshot.path in affected
            or _is_at_or_below(snapshot.path, changed)
            or snapshot.sort_rule != sort_rule
        )
        if not needs_reload:
            continue
        try:
            setattr(tab, slot, reload_snapshot(snapshot, sort_rule))
        except DirectoryReadError as exc:
            logger.warning("RELOAD FAILED | %s", exc)
            tab.load_errors.append(str(exc))
            setattr(tab, slot, None)
    refresh_preview(tab, sort_rule)


__all__ = [
    "MAX_JUMP_HISTORY",
    "DirectoryJumpHistory",
    "refresh_preview",
    "open_tab",
    "parent_directory",
    "child_directory",
    "change_directory",
    "go_back",
    "go_forward",
    "reload_tab",
]
