"""Persistent JSON config helpers.

Stores listing sort preferences, hidden-file visibility, paste defaults, and
the log level. All access is defensive: malformed or missing config falls
back safely.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from ..directory_model import SortMethod, SortRule
from ..fileops import DEFAULT_BUFFER_SIZE, PasteOptions

APP_NAME = "panefm"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
MIN_BUFFER_SIZE = 512
MAX_BUFFER_SIZE = 64 * 1024 * 1024


@dataclass(frozen=True)
class FileManagerConfig:
    """Startup settings resolved from the config file."""

    sort_rule: SortRule = SortRule()
    paste_options: PasteOptions = PasteOptions()
    log_level: str = "INFO"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _load_bool(data: dict[str, object], key: str, default: bool) -> bool:
    """Only explicit booleans are accepted; anything else yields ``default``."""
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _load_buffer_size(data: dict[str, object]) -> int:
    value = data.get("buffer_size")
    if isinstance(value, bool) or not isinstance(value, int):
        return DEFAULT_BUFFER_SIZE
    return max(MIN_BUFFER_SIZE, min(MAX_BUFFER_SIZE, value))


def _load_log_level(data: dict[str, object]) -> str:
    value = data.get("log_level")
    if not isinstance(value, str):
        return "INFO"
    level = value.strip().upper()
    return level if isinstance(logging.getLevelName(level), int) else "INFO"


def load_sort_rule(data: dict[str, object] | None = None) -> SortRule:
    """Build the listing sort rule from config values."""
    config = load_config() if data is None else data
    return SortRule(
        method=SortMethod.parse(config.get("sort_method")),
        directories_first=_load_bool(config, "directories_first", True),
        reverse=_load_bool(config, "sort_reverse", False),
        case_sensitive=_load_bool(config, "case_sensitive", False),
        show_hidden=_load_bool(config, "show_hidden", False),
    )


def load_paste_options(data: dict[str, object] | None = None) -> PasteOptions:
    """Build default paste options from config values."""
    config = load_config() if data is None else data
    return PasteOptions(
        overwrite=_load_bool(config, "paste_overwrite", False),
        skip_existing=_load_bool(config, "paste_skip_existing", False),
        buffer_size=_load_buffer_size(config),
    )


def save_show_hidden(show_hidden: bool) -> None:
    """Persist hidden-file visibility preference as a boolean."""
    config = load_config()
    config["show_hidden"] = bool(show_hidden)
    save_config(config)


def load_file_manager_config() -> FileManagerConfig:
    """Read the config file once and resolve every startup setting."""
    data = load_config()
    return FileManagerConfig(
        sort_rule=load_sort_rule(data),
        paste_options=load_paste_options(data),
        log_level=_load_log_level(data),
    )


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "FileManagerConfig",
    "load_config",
    "save_config",
    "load_sort_rule",
    "load_paste_options",
    "save_show_hidden",
    "load_file_manager_config",
]
