"""Plain three-pane renderer: parent | current | preview, plus status row."""

from __future__ import annotations

import time

from ..directory_model import DirectoryItem, DirectorySnapshot
from ..fileops import ProgressInfo
from .context import AppContext

PANE_RATIOS = (1, 3, 4)
REVERSE = "\x1b[7m"
RED = "\x1b[31m"
RESET = "\x1b[0m"


def pane_widths(columns: int) -> tuple[int, int, int]:
    """Split ``columns`` by ``PANE_RATIOS`` leaving one separator column per gap."""
    usable = max(3, columns - 2)
    total = sum(PANE_RATIOS)
    left = max(1, usable * PANE_RATIOS[0] // total)
    middle = max(1, usable * PANE_RATIOS[1] // total)
    right = max(1, usable - left - middle)
    return left, middle, right


def human_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "K", "M", "G", "T"):
        if value < 1024 or unit == "T":
            return f"{int(value)}{unit}" if unit == "B" else f"{value:.1f}{unit}"
        value /= 1024
    return f"{size}B"


def draw_loading_bar(progress: ProgressInfo, width: int) -> str:
    """Return ``[####----] 50%`` sized to ``width`` columns."""
    percent = int(progress.fraction * 100)
    label = f" {percent:3d}%"
    inner = max(1, width - len(label) - 2)
    filled = int(inner * progress.fraction)
    return "[" + "#" * filled + "-" * (inner - filled) + "]" + label


def _fit(text: str, width: int) -> str:
    if len(text) > width:
        return text[: max(0, width - 1)] + "~" if width > 1 else text[:width]
    return text.ljust(width)


def format_entry(entry: DirectoryItem, width: int, show_size: bool) -> str:
    marker = "*" if entry.selected else " "
    name = entry.name + ("/" if entry.is_dir else "")
    if entry.metadata.is_symlink:
        name += "@"
    if not show_size or entry.is_dir:
        return _fit(marker + name, width)
    size = human_size(entry.metadata.size)
    room = width - len(size) - 1
    if room < 4:
        return _fit(marker + name, width)
    return _fit(marker + name, room) + " " + size


def pane_rows(snapshot: DirectorySnapshot | None, width: int, height: int, *, show_size: bool = False) -> list[str]:
    """Render ``height`` rows of one pane, scrolled so the cursor is visible."""
    if snapshot is None:
        return [" " * width for _ in range(height)]
    if snapshot.is_empty():
        return [_fit(" (empty)", width)] + [" " * width for _ in range(height - 1)]
    index = snapshot.index or 0
    start = max(0, min(index - height // 2, len(snapshot) - height))
    rows: list[str] = []
    for row_idx in range(start, min(len(snapshot), start + height)):
        text = format_entry(snapshot.entries[row_idx], width, show_size)
        if row_idx == index:
            text = REVERSE + text + RESET
        rows.append(text)
    while len(rows) < height:
        rows.append(" " * width)
    return rows


def describe_entry(entry: DirectoryItem | None) -> str:
    if entry is None:
        return ""
    metadata = entry.metadata
    parts = [metadata.permissions]
    if not entry.is_dir:
        parts.append(human_size(metadata.size))
    if metadata.mtime_ns is not None:
        parts.append(time.strftime("%Y-%m-%d %H:%M", time.localtime(metadata.mtime_ns / 1e9)))
    return "  ".join(parts)


def status_row(context: AppContext, columns: int) -> str:
    if context.loading_progress is not None:
        handle = context.active_operation
        label = f"{handle.operation} " if handle is not None else ""
        return label + draw_loading_bar(context.loading_progress, max(8, columns - len(label)))
    if context.status_message:
        text = _fit(context.status_message, columns)
        return RED + text + RESET if context.status_is_error else text
    tab = context.curr_tab
    entry = tab.curr_list.get_curr_entry() if tab.curr_list is not None else None
    return _fit(describe_entry(entry), columns)


def render_screen(context: AppContext, columns: int, rows: int) -> str:
    """Build the full frame as one string of ANSI-positioned rows."""
    tab = context.curr_tab
    left, middle, right = pane_widths(columns)
    body_height = max(1, rows - 2)

    tabs = f"[{context.tab_index + 1}/{len(context.tabs)}] " if len(context.tabs) > 1 else ""
    header = _fit(tabs + str(tab.curr_path), columns)

    parent_rows = pane_rows(tab.parent_list, left, body_height)
    curr_rows = pane_rows(tab.curr_list, middle, body_height, show_size=True)
    preview_rows = pane_rows(tab.preview_list, right, body_height)

    lines = [header]
    for parent_text, curr_text, preview_text in zip(parent_rows, curr_rows, preview_rows):
        lines.append(parent_text + "|" + curr_text + "|" + preview_text)
    lines.append(status_row(context, columns))
    return "\x1b[H\x1b[2J" + "\r\n".join(lines)


__all__ = [
    "PANE_RATIOS",
    "pane_widths",
    "human_size",
    "draw_loading_bar",
    "format_entry",
    "pane_rows",
    "describe_entry",
    "status_row",
    "render_screen",
]
