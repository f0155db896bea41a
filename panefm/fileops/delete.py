"""Delete engine: remove paths on a worker with item-granular progress."""

from __future__ import annotations

import logging
import os
import shutil
import stat
from collections.abc import Iterable
from pathlib import Path

from .progress import OperationHandle, OperationReport, ProgressReporter

logger = logging.getLogger(__name__)


def remove_any(path: Path) -> None:
    """Remove a file, symlink, or whole directory tree."""
    st = os.lstat(path)
    if stat.S_ISDIR(st.st_mode):
        shutil.rmtree(path)
    else:
        os.unlink(path)


def remove_items_with_progress(paths: Iterable[Path], reporter: ProgressReporter) -> OperationReport:
    """Remove ``paths`` in order; a failing item is recorded and skipped.

    Paths that are already gone count as finished without a failure.
    """
    items = list(paths)
    report = OperationReport(operation="delete", total=len(items))
    for path in items:
        if reporter.cancelled:
            report.cancelled = True
            break
        failures_before = len(report.failures)
        logger.info("DELETE | %s", path)
        try:
            remove_any(path)
        except FileNotFoundError:
            logger.info("DELETE | %s already gone", path)
        except OSError as exc:
            logger.warning("DELETE FAILED | %s | %s", path, exc)
            report.record_failure(path, exc)
        report.finish_item(path, failures_before)
        reporter.report(report.finished, report.total)
    return report


def delete_files(paths: Iterable[Path]) -> OperationHandle:
    """Start a worker deleting ``paths`` and return its handle."""
    items = list(paths)

    def work(reporter: ProgressReporter) -> OperationReport:
        return remove_items_with_progress(items, reporter)

    handle = OperationHandle(
        "delete",
        work,
        affected_dirs={path.parent for path in items},
        removed_paths=items,
    )
    return handle.start()


__all__ = [
    "remove_any",
    "remove_items_with_progress",
    "delete_files",
]
