"""File logging for the interactive session; the terminal belongs to the UI."""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

APP_NAME = "panefm"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s"


def default_log_file() -> Path:
    return Path(user_log_dir(APP_NAME, appauthor=False)) / "panefm.log"


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> Path:
    """Route root logging to ``log_file`` and return the path used."""
    target = log_file if log_file is not None else default_log_file()
    target.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(target, encoding="utf-8"),
        ],
        force=True,
    )
    return target


__all__ = [
    "LOG_FORMAT",
    "default_log_file",
    "setup_logging",
]
