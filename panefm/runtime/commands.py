"""Foreground commands bound to keys.

Commands mutate ``AppContext`` on the UI thread, start workers, and turn
every failure into a status message. Blocking prompts are injected as
callables so this module never reads the terminal itself.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from pathlib import Path

from ..errors import NavigationError, OperationInProgressError, RenameError
from ..fileops import (
    OperationHandle,
    PasteOptions,
    ProgressInfo,
    RenameMode,
    collect_selected_paths,
    delete_files as start_delete,
    paste_files as start_paste,
    rename_path,
)
from . import navigation
from .context import AppContext
from .line_input import LineBuffer, initial_line
from .tab import Tab

logger = logging.getLogger(__name__)

DELETE_PROMPT = "Delete selected files? (Y/n)"
RENAME_PROMPT = ":rename_file "

Confirm = Callable[[str], bool]
ReadLine = Callable[[str, LineBuffer], str | None]
ShowProgress = Callable[[ProgressInfo | None], None]


def _ensure_idle(context: AppContext) -> None:
    handle = context.active_operation
    if handle is not None and handle.is_running():
        raise OperationInProgressError(f"{handle.operation} still in progress")


def _navigate(context: AppContext, step: Callable[[], bool]) -> bool:
    try:
        moved = step()
    except NavigationError as exc:
        context.set_status(str(exc), error=True)
        return False
    tab = context.curr_tab
    if tab.load_errors:
        context.set_status(tab.load_errors[-1], error=True)
    elif moved:
        context.clear_status()
    return moved


def reload_all_tabs(
    context: AppContext,
    affected_dirs: Iterable[Path] | None = None,
    removed_paths: Iterable[Path] = (),
    changed_trees: Iterable[Path] = (),
) -> None:
    """Reload every tab after a mutation or a sort-rule change."""
    for tab in context.tabs:
        navigation.reload_tab(tab, context.sort_rule, affected_dirs, removed_paths, changed_trees)
    context.dirty = True


def move_cursor(context: AppContext, delta: int) -> bool:
    tab = context.curr_tab
    if tab.curr_list is None or not tab.curr_list.move_cursor(delta):
        return False
    navigation.refresh_preview(tab, context.sort_rule)
    context.dirty = True
    return True


def cursor_to_edge(context: AppContext, bottom: bool) -> bool:
    snapshot = context.curr_tab.curr_list
    if snapshot is None or snapshot.is_empty():
        return False
    return move_cursor(context, len(snapshot) if bottom else -len(snapshot))


def toggle_select(context: AppContext) -> bool:
    """Flip the cursor entry's selection flag and advance the cursor."""
    snapshot = context.curr_tab.curr_list
    if snapshot is None or not snapshot.toggle_selected():
        return False
    move_cursor(context, 1)
    context.dirty = True
    return True


def select_all(context: AppContext) -> bool:
    snapshot = context.curr_tab.curr_list
    if snapshot is None or snapshot.is_empty():
        return False
    if all(entry.selected for entry in snapshot.entries):
        snapshot.clear_selection()
    else:
        snapshot.select_all()
    context.dirty = True
    return True


def cut_files(context: AppContext) -> bool:
    if not context.pending.mark_for_cut(context.curr_tab.curr_list):
        return False
    context.set_status(f"{len(context.pending.paths)} item(s) marked to move")
    return True


def copy_files(context: AppContext) -> bool:
    if not context.pending.mark_for_copy(context.curr_tab.curr_list):
        return False
    context.set_status(f"{len(context.pending.paths)} item(s) marked to copy")
    return True


def paste_files(context: AppContext, options: PasteOptions | None = None) -> OperationHandle | None:
    """Start pasting into the current directory without blocking.

    The handle is registered on the context for ``poll_operations``.
    """
    try:
        _ensure_idle(context)
    except OperationInProgressError as exc:
        context.set_status(str(exc), error=True)
        return None
    handle = start_paste(context.pending, context.curr_path, options or context.paste_options)
    if handle is None:
        context.set_status("Nothing to paste")
        return None
    context.active_operation = handle
    context.loading_progress = None
    context.set_status(f"{handle.operation} started")
    return handle


def paste_overwrite(context: AppContext) -> OperationHandle | None:
    return paste_files(context, replace(context.paste_options, overwrite=True, skip_existing=False))


def paste_skip_existing(context: AppContext) -> OperationHandle | None:
    return paste_files(context, replace(context.paste_options, overwrite=False, skip_existing=True))


def _finish_operation(context: AppContext, handle: OperationHandle) -> None:
    report = handle.join()
    context.active_operation = None
    context.loading_progress = None
    reload_all_tabs(context, handle.affected_dirs, handle.removed_paths, handle.changed_trees)
    if report is None:
        context.set_status(f"{handle.operation} finished")
        return
    logger.info("%s finished | %s", handle.operation, report.summary())
    context.set_status(report.summary(), error=not report.ok)


def poll_operations(context: AppContext) -> bool:
    """Drain progress of the in-flight worker; finish it when done.

    Called once per event-loop tick. Returns whether anything changed.
    """
    handle = context.active_operation
    if handle is None:
        return False
    progress = handle.poll()
    if progress is not None:
        context.loading_progress = progress
        context.dirty = True
    if handle.finished:
        _finish_operation(context, handle)
        return True
    return progress is not None


def cancel_operation(context: AppContext) -> bool:
    handle = context.active_operation
    if handle is None or not handle.is_running() or handle.cancel_requested:
        return False
    handle.cancel()
    context.set_status(f"cancelling {handle.operation}")
    return True


def delete_files(
    context: AppContext,
    confirm: Confirm,
    show_progress: ShowProgress,
) -> bool:
    """Confirm, then delete the selection while blocking on worker progress."""
    try:
        _ensure_idle(context)
    except OperationInProgressError as exc:
        context.set_status(str(exc), error=True)
        return False
    paths = collect_selected_paths(context.curr_tab.curr_list)
    if paths is None:
        return False
    if not confirm(DELETE_PROMPT):
        context.clear_status()
        return False

    handle = start_delete(paths)
    for progress in handle.iter_progress():
        show_progress(progress)
    show_progress(None)

    report = handle.join()
    context.pending.clear()
    reload_all_tabs(context, handle.affected_dirs, handle.removed_paths, handle.changed_trees)
    if report is None or report.ok:
        context.set_status(f"Deleted {len(paths)} file(s)")
        return True
    context.set_status(report.summary(), error=True)
    return False


def rename_file(context: AppContext, mode: RenameMode, read_line: ReadLine) -> bool:
    """Prompt for a new name for the cursor entry and rename it."""
    tab = context.curr_tab
    entry = tab.curr_list.get_curr_entry() if tab.curr_list is not None else None
    if entry is None:
        return False
    text = read_line(RENAME_PROMPT, initial_line(mode, entry.name))
    context.dirty = True
    if text is None:
        return False
    try:
        new_path = rename_path(entry.path, text)
    except RenameError as exc:
        context.set_status(str(exc), error=True)
        return False

    reload_all_tabs(context, {entry.path.parent}, (entry.path,))
    if tab.curr_list is not None and tab.curr_list.focus(new_path):
        navigation.refresh_preview(tab, context.sort_rule)
    context.clear_status()
    return True


def parent_directory(context: AppContext) -> bool:
    tab = context.curr_tab
    return _navigate(context, lambda: navigation.parent_directory(tab, context.sort_rule, context.change_dir))


def child_directory(context: AppContext) -> bool:
    tab = context.curr_tab
    return _navigate(context, lambda: navigation.child_directory(tab, context.sort_rule, context.change_dir))


def go_back(context: AppContext) -> bool:
    tab = context.curr_tab
    return _navigate(context, lambda: navigation.go_back(tab, context.sort_rule, context.change_dir))


def go_forward(context: AppContext) -> bool:
    tab = context.curr_tab
    return _navigate(context, lambda: navigation.go_forward(tab, context.sort_rule, context.change_dir))


def reload_dirlists(context: AppContext) -> bool:
    reload_all_tabs(context)
    tab = context.curr_tab
    if tab.load_errors:
        context.set_status(tab.load_errors[-1], error=True)
    return True


def toggle_hidden(context: AppContext, persist: Callable[[bool], None] | None = None) -> bool:
    """Flip hidden-file visibility; cached listings with the old rule go stale."""
    show_hidden = not context.sort_rule.show_hidden
    context.sort_rule = replace(context.sort_rule, show_hidden=show_hidden)
    if persist is not None:
        persist(show_hidden)
    reload_all_tabs(context)
    context.set_status("showing hidden files" if show_hidden else "hiding hidden files")
    return True


def new_tab(context: AppContext) -> bool:
    """Open a tab on the current directory and switch to it."""
    tab = Tab(curr_path=context.curr_path)
    try:
        navigation.open_tab(tab, context.sort_rule, context.change_dir)
    except NavigationError as exc:
        context.set_status(str(exc), error=True)
        return False
    context.tabs.append(tab)
    context.tab_index = len(context.tabs) - 1
    context.dirty = True
    return True


def switch_tab(context: AppContext, delta: int) -> bool:
    if len(context.tabs) < 2:
        return False
    index = (context.tab_index + delta) % len(context.tabs)
    try:
        context.change_dir(context.tabs[index].curr_path)
    except OSError as exc:
        context.set_status(str(exc), error=True)
        return False
    context.tab_index = index
    context.dirty = True
    return True


def close_tab(context: AppContext) -> bool:
    """Close the current tab; returns ``False`` when it is the last one."""
    if len(context.tabs) < 2:
        return False
    context.tabs.pop(context.tab_index)
    context.tab_index = min(context.tab_index, len(context.tabs) - 1)
    try:
        context.change_dir(context.curr_path)
    except OSError as exc:
        context.set_status(str(exc), error=True)
    context.dirty = True
    return True


__all__ = [
    "DELETE_PROMPT",
    "RENAME_PROMPT",
    "reload_all_tabs",
    "move_cursor",
    "cursor_to_edge",
    "toggle_select",
    "select_all",
    "cut_files",
    "copy_files",
    "paste_files",
    "paste_overwrite",
    "paste_skip_existing",
    "poll_operations",
    "cancel_operation",
    "delete_files",
    "rename_file",
    "parent_directory",
    "child_directory",
    "go_back",
    "go_forward",
    "reload_dirlists",
    "toggle_hidden",
    "new_tab",
    "switch_tab",
    "close_tab",
]
