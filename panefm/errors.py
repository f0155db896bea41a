"""Error taxonomy for navigation, rename, and operation dispatch failures.

Per-item filesystem errors inside workers are not raised; they are collected
into ``OperationReport.failures`` instead.
"""

from __future__ import annotations

from pathlib import Path


class PanefmError(Exception):
    """Base class for user-reportable failures."""


class DirectoryReadError(PanefmError):
    """A directory listing could not be read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class NavigationError(PanefmError):
    """Changing into a directory failed; tab state was left untouched."""


class RenameError(PanefmError):
    """A rename was rejected or failed at the OS level."""


class OperationInProgressError(PanefmError):
    """Another paste/delete worker is still running."""


__all__ = [
    "PanefmError",
    "DirectoryReadError",
    "NavigationError",
    "RenameError",
    "OperationInProgressError",
]
