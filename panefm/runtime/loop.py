"""Main interactive event loop for the terminal UI.

Each tick polls the in-flight worker, redraws when dirty, and dispatches one
key. Feature logic lives in ``commands``; this loop is only wiring.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..fileops import RenameMode
from . import commands
from .context import AppContext

QUIT_KEYS = frozenset({"q"})

KeyAction = Callable[[], object]


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Input wait per tick while idle and while a worker is running."""

    idle_timeout_ms: int = 500
    busy_timeout_ms: int = 50


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Terminal-facing operations injected into ``run_main_loop``."""

    read_key: Callable[[int | None], str]
    draw: Callable[[AppContext], None]


def run_main_loop(
    context: AppContext,
    key_actions: dict[str, KeyAction],
    callbacks: RuntimeLoopCallbacks,
    timing: RuntimeLoopTiming = RuntimeLoopTiming(),
) -> None:
    """Run until a quit key is read.

    Paste workers are never waited on here; progress is polled once per
    tick so the UI keeps responding while they run.
    """
    while True:
        commands.poll_operations(context)
        if context.dirty:
            callbacks.draw(context)
            context.dirty = False

        busy = context.active_operation is not None
        key = callbacks.read_key(timing.busy_timeout_ms if busy else timing.idle_timeout_ms)
        if not key:
            continue
        if key in QUIT_KEYS:
            return
        action = key_actions.get(key)
        if action is None:
            continue
        if context.status_message and not context.status_is_error:
            context.status_message = ""
        action()
        context.dirty = True


def default_key_actions(
    context: AppContext,
    *,
    confirm: commands.Confirm,
    read_line: commands.ReadLine,
    show_progress: commands.ShowProgress,
    persist_show_hidden: Callable[[bool], None] | None = None,
) -> dict[str, KeyAction]:
    """Return the built-in key table bound to ``context``."""
    ctx = context
    actions: dict[str, KeyAction] = {
        "j": lambda: commands.move_cursor(ctx, 1),
        "DOWN": lambda: commands.move_cursor(ctx, 1),
        "k": lambda: commands.move_cursor(ctx, -1),
        "UP": lambda: commands.move_cursor(ctx, -1),
        "PAGE_DOWN": lambda: commands.move_cursor(ctx, 20),
        "PAGE_UP": lambda: commands.move_cursor(ctx, -20),
        "g": lambda: commands.cursor_to_edge(ctx, bottom=False),
        "HOME": lambda: commands.cursor_to_edge(ctx, bottom=False),
        "G": lambda: commands.cursor_to_edge(ctx, bottom=True),
        "END": lambda: commands.cursor_to_edge(ctx, bottom=True),
        "h": lambda: commands.parent_directory(ctx),
        "LEFT": lambda: commands.parent_directory(ctx),
        "BACKSPACE": lambda: commands.parent_directory(ctx),
        "l": lambda: commands.child_directory(ctx),
        "RIGHT": lambda: commands.child_directory(ctx),
        "ENTER_CR": lambda: commands.child_directory(ctx),
        "ENTER_LF": lambda: commands.child_directory(ctx),
        "H": lambda: commands.go_back(ctx),
        "L": lambda: commands.go_forward(ctx),
        " ": lambda: commands.toggle_select(ctx),
        "v": lambda: commands.select_all(ctx),
        "d": lambda: commands.cut_files(ctx),
        "y": lambda: commands.copy_files(ctx),
        "p": lambda: commands.paste_files(ctx),
        "P": lambda: commands.paste_overwrite(ctx),
        "n": lambda: commands.paste_skip_existing(ctx),
        "D": lambda: commands.delete_files(ctx, confirm, show_progress),
        "a": lambda: commands.rename_file(ctx, RenameMode.APPEND, read_line),
        "I": lambda: commands.rename_file(ctx, RenameMode.PREPEND, read_line),
        "A": lambda: commands.rename_file(ctx, RenameMode.OVERWRITE, read_line),
        "c": lambda: commands.cancel_operation(ctx),
        "r": lambda: commands.reload_dirlists(ctx),
        ".": lambda: commands.toggle_hidden(ctx, persist_show_hidden),
        "t": lambda: commands.new_tab(ctx),
        "TAB": lambda: commands.switch_tab(ctx, 1),
        "W": lambda: commands.close_tab(ctx),
    }
    return actions


__all__ = [
    "QUIT_KEYS",
    "RuntimeLoopTiming",
    "RuntimeLoopCallbacks",
    "run_main_loop",
    "default_key_actions",
]
