"""Command-line front door for panefm.

Parses CLI options, merges them over the config file, sets up logging, and
dispatches into the interactive runtime.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path

from .errors import PanefmError
from .log_setup import setup_logging
from .runtime import run_file_manager
from .runtime.config import FileManagerConfig, load_file_manager_config

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Three-pane terminal file manager.")
    parser.add_argument("path", nargs="?", default=None, help="Directory to open. Defaults to current directory.")
    parser.add_argument("--show-hidden", action="store_true", help="List dotfiles.")
    parser.add_argument("--buffer-size", type=_positive_int, default=None, help="Copy chunk size in bytes.")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default=None, help="Log verbosity.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs here instead of the user log dir.")
    return parser


def resolve_config(args: argparse.Namespace, base: FileManagerConfig) -> FileManagerConfig:
    """Apply command-line overrides on top of the loaded config."""
    config = base
    if args.show_hidden:
        config = replace(config, sort_rule=replace(config.sort_rule, show_hidden=True))
    if args.buffer_size is not None:
        config = replace(config, paste_options=replace(config.paste_options, buffer_size=args.buffer_size))
    if args.log_level is not None:
        config = replace(config, log_level=args.log_level)
    return config


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and launch panefm on a directory.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used. A file argument opens its containing directory.
    """
    args = build_parser().parse_args()
    config = resolve_config(args, load_file_manager_config())
    log_file = setup_logging(config.log_level, args.log_file)
    logging.getLogger(__name__).info("logging to %s", log_file)

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path) if args.path is not None else default_path
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    if not path.is_dir():
        path = path.parent

    try:
        run_file_manager(path, config)
    except PanefmError as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    main()
