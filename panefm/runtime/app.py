"""Interactive session bootstrap: build context, bind prompts, run the loop."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from ..fileops import ProgressInfo
from ..input import read_key
from . import config as config_store
from .config import FileManagerConfig
from .context import AppContext
from .line_input import LineBuffer, prompt_line
from .loop import RuntimeLoopCallbacks, default_key_actions, run_main_loop
from .navigation import open_tab
from .render import RED, RESET, draw_loading_bar, render_screen
from .tab import Tab
from .terminal import TerminalController

logger = logging.getLogger(__name__)


class TerminalPrompts:
    """Blocking prompts drawn on the bottom row of the terminal."""

    def __init__(self, terminal: TerminalController) -> None:
        self.terminal = terminal

    def _bottom_row(self, text: str) -> None:
        columns, rows = self.terminal.size()
        self.terminal.write(f"\x1b[{rows};1H\x1b[2K{text[:columns]}")

    def confirm(self, message: str) -> bool:
        self._bottom_row(message)
        key = read_key(self.terminal.stdin_fd)
        return key in {"y", "Y", "ENTER_CR", "ENTER_LF"}

    def read_line(self, prompt: str, buffer: LineBuffer) -> str | None:
        def draw(current: LineBuffer) -> None:
            self._bottom_row(prompt + current.text)
            columns, rows = self.terminal.size()
            column = min(columns, len(prompt) + current.cursor + 1)
            self.terminal.write(f"\x1b[{rows};{column}H\x1b[?25h")

        try:
            return prompt_line(buffer, lambda: read_key(self.terminal.stdin_fd), draw)
        finally:
            self.terminal.write("\x1b[?25l")

    def show_progress(self, progress: ProgressInfo | None) -> None:
        if progress is None:
            self._bottom_row("")
            return
        columns, _rows = self.terminal.size()
        self._bottom_row(draw_loading_bar(progress, columns))


def build_context(path: Path, config: FileManagerConfig) -> AppContext:
    """Open the first tab on ``path`` and wrap it in a fresh context."""
    tab = Tab(curr_path=path.resolve())
    open_tab(tab, config.sort_rule)
    return AppContext(
        tabs=[tab],
        sort_rule=config.sort_rule,
        paste_options=config.paste_options,
    )


def run_file_manager(path: Path, config: FileManagerConfig) -> None:
    """Run the interactive file manager until the user quits."""
    context = build_context(path, config)
    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    prompts = TerminalPrompts(terminal)

    def draw(ctx: AppContext) -> None:
        columns, rows = terminal.size()
        terminal.write(render_screen(ctx, columns, rows))

    key_actions = default_key_actions(
        context,
        confirm=prompts.confirm,
        read_line=prompts.read_line,
        show_progress=prompts.show_progress,
        persist_show_hidden=config_store.save_show_hidden,
    )
    callbacks = RuntimeLoopCallbacks(
        read_key=lambda timeout_ms: read_key(stdin_fd, timeout_ms=timeout_ms),
        draw=draw,
    )

    with terminal.raw_mode():
        run_main_loop(context, key_actions, callbacks)

    handle = context.active_operation
    if handle is not None and handle.is_running():
        sys.stderr.write(f"waiting for {handle.operation} to finish...\n")
        report = handle.join()
        if report is not None and not report.ok:
            sys.stderr.write(f"{RED}{report.summary()}{RESET}\n")
    logger.info("session ended in %s", context.curr_path)


__all__ = [
    "TerminalPrompts",
    "build_context",
    "run_file_manager",
]
