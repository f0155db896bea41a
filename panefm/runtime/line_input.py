"""Single-line text buffer used by the rename prompt.

Keeps editing pure (``apply_line_key``) so the blocking prompt loop only
wires key reads and redraws around it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..fileops import RenameMode


@dataclass
class LineBuffer:
    """Editable text with a cursor offset in ``[0, len(text)]``."""

    text: str = ""
    cursor: int = 0

    def __post_init__(self) -> None:
        self.cursor = max(0, min(self.cursor, len(self.text)))

    def insert(self, chars: str) -> None:
        self.text = self.text[: self.cursor] + chars + self.text[self.cursor :]
        self.cursor += len(chars)

    def backspace(self) -> None:
        if self.cursor == 0:
            return
        self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
        self.cursor -= 1

    def delete(self) -> None:
        self.text = self.text[: self.cursor] + self.text[self.cursor + 1 :]

    def move(self, delta: int) -> None:
        self.cursor = max(0, min(len(self.text), self.cursor + delta))

    def home(self) -> None:
        self.cursor = 0

    def end(self) -> None:
        self.cursor = len(self.text)

    def clear_before_cursor(self) -> None:
        self.text = self.text[self.cursor :]
        self.cursor = 0


def initial_line(mode: RenameMode, seed_text: str) -> LineBuffer:
    """Seed a rename buffer: cursor after, before, or with no existing name."""
    if mode is RenameMode.APPEND:
        return LineBuffer(seed_text, len(seed_text))
    if mode is RenameMode.PREPEND:
        return LineBuffer(seed_text, 0)
    return LineBuffer()


def apply_line_key(buffer: LineBuffer, key: str) -> bool | None:
    """Apply one key token to ``buffer``.

    Returns ``True`` to submit, ``False`` to cancel, ``None`` to keep editing.
    """
    if key in {"ENTER_CR", "ENTER_LF"}:
        return True
    if key == "ESC":
        return False
    if key == "BACKSPACE":
        buffer.backspace()
    elif key == "DELETE":
        buffer.delete()
    elif key == "LEFT":
        buffer.move(-1)
    elif key == "RIGHT":
        buffer.move(1)
    elif key in {"HOME", "CTRL_A"}:
        buffer.home()
    elif key in {"END", "CTRL_E"}:
        buffer.end()
    elif key == "CTRL_U":
        buffer.clear_before_cursor()
    elif len(key) == 1 and key.isprintable():
        buffer.insert(key)
    return None


def prompt_line(
    buffer: LineBuffer,
    read_key: Callable[[], str],
    draw: Callable[[LineBuffer], None],
) -> str | None:
    """Block on ``read_key`` until submit or cancel; return the text or ``None``."""
    while True:
        draw(buffer)
        key = read_key()
        if not key:
            # Blocking reads only come back empty at end of input.
            return None
        outcome = apply_line_key(buffer, key)
        if outcome is True:
            return buffer.text
        if outcome is False:
            return None


__all__ = [
    "LineBuffer",
    "initial_line",
    "apply_line_key",
    "prompt_line",
]
