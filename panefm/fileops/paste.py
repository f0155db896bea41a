"""Paste engine: copy or move the pending Path Set into a destination directory.

Copy reports progress in bytes after every chunk. Move reports progress in
items because a cross-device fallback cannot cheaply report sub-file bytes
uniformly. Both record per-item failures and keep going.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
import stat
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .progress import OperationHandle, OperationReport, ProgressReporter
from .selection import OperationKind, PendingOperation

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 64_000


@dataclass(frozen=True)
class PasteOptions:
    """Conflict policy and chunk size for one paste."""

    overwrite: bool = False
    skip_existing: bool = False
    buffer_size: int = DEFAULT_BUFFER_SIZE


class _ByteCounter:
    """Monotonic byte counter that optionally forwards to a reporter."""

    def __init__(self, total: int, reporter: ProgressReporter | None = None) -> None:
        self.total = total
        self.finished = 0
        self._reporter = reporter
        self._last_sent: int | None = None

    def _send(self) -> None:
        if self._reporter is None:
            return
        value = min(self.finished, self.total)
        if value == self._last_sent:
            return
        self._last_sent = value
        self._reporter.report(value, self.total)

    def advance(self, amount: int) -> None:
        self.finished += amount
        self._send()

    def advance_to(self, value: int) -> None:
        if value > self.finished:
            self.finished = value
            self._send()

    def finish(self) -> None:
        if self._reporter is None:
            return
        if self._last_sent != self.total:
            self._last_sent = self.total
            self._reporter.report(self.total, self.total)


def tree_size(path: Path) -> int:
    """Return the byte size of ``path`` including everything below a directory."""
    try:
        st = os.lstat(path)
    except OSError:
        return 0
    if not stat.S_ISDIR(st.st_mode):
        return 0 if stat.S_ISLNK(st.st_mode) else int(st.st_size)
    total = 0
    try:
        with os.scandir(path) as entries:
            children = [Path(child.path) for child in entries]
    except OSError:
        return 0
    for child in children:
        total += tree_size(child)
    return total


def _is_same_path(src: Path, dst: Path) -> bool:
    try:
        return os.path.samefile(src, dst)
    except OSError:
        return False


def _ensure_not_into_itself(src: Path, dst: Path) -> None:
    source = src.resolve()
    target = dst.parent.resolve() / dst.name
    if target == source or target.is_relative_to(source):
        raise OSError(errno.EINVAL, "Cannot paste a directory into itself", str(dst))


def _check_destination(src: Path, dst: Path, options: PasteOptions) -> bool:
    """Return ``False`` when ``dst`` must be skipped, raise when it conflicts."""
    if not os.path.lexists(dst):
        return True
    if _is_same_path(src, dst):
        raise OSError(errno.EINVAL, "Source and destination are the same file", str(dst))
    if options.skip_existing:
        return False
    if options.overwrite:
        return True
    raise FileExistsError(errno.EEXIST, "Destination already exists", str(dst))


def _copy_file(src: Path, dst: Path, options: PasteOptions, counter: _ByteCounter) -> None:
    buffer_size = max(1, options.buffer_size)
    with open(src, "rb") as reader, open(dst, "wb") as writer:
        while True:
            chunk = reader.read(buffer_size)
            if not chunk:
                break
            writer.write(chunk)
            counter.advance(len(chunk))
    shutil.copystat(src, dst)


def _copy_entry(
    src: Path,
    dst: Path,
    options: PasteOptions,
    counter: _ByteCounter,
    report: OperationReport,
    reporter: ProgressReporter | None,
) -> None:
    """Copy one file, symlink, or directory tree from ``src`` to ``dst``.

    Failures below a directory are recorded per child and do not stop the
    rest of the tree. Failures of ``src`` itself are raised.
    """
    st = os.lstat(src)
    if stat.S_ISDIR(st.st_mode):
        _ensure_not_into_itself(src, dst)
        if os.path.lexists(dst) and not dst.is_dir():
            raise FileExistsError(errno.EEXIST, "Destination exists and is not a directory", str(dst))
        if dst.is_dir() and not (options.overwrite or options.skip_existing):
            raise FileExistsError(errno.EEXIST, "Destination already exists", str(dst))
        os.makedirs(dst, exist_ok=True)
        with os.scandir(src) as entries:
            names = sorted(child.name for child in entries)
        for name in names:
            if reporter is not None and reporter.cancelled:
                report.cancelled = True
                return
            child_src = src / name
            child_dst = dst / name
            start = counter.finished
            size = tree_size(child_src)
            try:
                _copy_entry(child_src, child_dst, options, counter, report, reporter)
            except OSError as exc:
                logger.warning("COPY FAILED | %s -> %s | %s", child_src, child_dst, exc)
                report.record_failure(child_src, exc)
            counter.advance_to(start + size)
        shutil.copystat(src, dst)
        return

    if not _check_destination(src, dst, options):
        logger.info("SKIP | %s exists", dst)
        report.skipped.append(src)
        return
    if stat.S_ISLNK(st.st_mode):
        if os.path.lexists(dst):
            os.unlink(dst)
        os.symlink(os.readlink(src), dst)
        return
    _copy_file(src, dst, options, counter)


def copy_items_with_progress(
    paths: Iterable[Path],
    destination: Path,
    options: PasteOptions,
    reporter: ProgressReporter,
) -> OperationReport:
    """Copy ``paths`` into ``destination`` reporting bytes copied / total bytes."""
    items = list(paths)
    report = OperationReport(operation="copy", total=len(items))
    sizes = [tree_size(path) for path in items]
    counter = _ByteCounter(sum(sizes), reporter)

    for path, size in zip(items, sizes):
        if reporter.cancelled:
            report.cancelled = True
            break
        dst = destination / path.name
        start = counter.finished
        failures_before = len(report.failures)
        logger.info("COPY | %s -> %s", path, dst)
        try:
            _copy_entry(path, dst, options, counter, report, reporter)
        except OSError as exc:
            logger.warning("COPY FAILED | %s -> %s | %s", path, dst, exc)
            report.record_failure(path, exc)
        counter.advance_to(start + size)
        report.finish_item(path, failures_before)
        if report.cancelled:
            break

    if not report.cancelled:
        counter.finish()
    return report


def move_dir(src: Path, dst: Path, options: PasteOptions) -> None:
    """Copy the tree at ``src`` to ``dst`` and then delete ``src``.

    The source tree is kept when any part of the copy failed.
    """
    sub_report = OperationReport(operation="move")
    counter = _ByteCounter(tree_size(src))
    _copy_entry(src, dst, options, counter, sub_report, None)
    if sub_report.failures:
        failed_path, message = sub_report.failures[0]
        raise OSError(
            errno.EIO,
            f"Partial move, source kept ({failed_path.name}: {message})",
            str(src),
        )
    shutil.rmtree(src)


def move_file(src: Path, dst: Path, options: PasteOptions) -> bool:
    """Copy the file or symlink at ``src`` to ``dst`` and unlink ``src``.

    Returns ``False`` when ``dst`` was skipped and nothing was touched.
    """
    sub_report = OperationReport(operation="move")
    counter = _ByteCounter(tree_size(src))
    _copy_entry(src, dst, options, counter, sub_report, None)
    if sub_report.skipped:
        return False
    os.unlink(src)
    return True


def _move_entry(src: Path, dst: Path, options: PasteOptions) -> bool:
    """Move one item, returning ``False`` when it was skipped."""
    if os.path.lexists(dst):
        if _is_same_path(src, dst):
            return False
        if options.skip_existing:
            return False
        if not options.overwrite:
            raise FileExistsError(errno.EEXIST, "Destination already exists", str(dst))
    if os.path.isdir(src) and not os.path.islink(src):
        _ensure_not_into_itself(src, dst)

    try:
        os.rename(src, dst)
        return True
    except OSError as rename_error:
        logger.info("MOVE FALLBACK | %s -> %s | %s", src, dst, rename_error)

    if stat.S_ISDIR(os.lstat(src).st_mode):
        move_dir(src, dst, options)
        return True
    return move_file(src, dst, options)


def move_items_with_progress(
    paths: Iterable[Path],
    destination: Path,
    options: PasteOptions,
    reporter: ProgressReporter,
) -> OperationReport:
    """Move ``paths`` into ``destination`` reporting items finished / total items.

    Each item is renamed when possible and copied-then-deleted otherwise.
    """
    items = list(paths)
    report = OperationReport(operation="move", total=len(items))
    for path in items:
        if reporter.cancelled:
            report.cancelled = True
            break
        dst = destination / path.name
        failures_before = len(report.failures)
        logger.info("MOVE | %s -> %s", path, dst)
        try:
            if not _move_entry(path, dst, options):
                logger.info("SKIP | %s exists", dst)
                report.skipped.append(path)
        except OSError as exc:
            logger.warning("MOVE FAILED | %s -> %s | %s", path, dst, exc)
            report.record_failure(path, exc)
        report.finish_item(path, failures_before)
        reporter.report(report.finished, report.total)
    return report


def paste_files(
    pending: PendingOperation,
    destination: Path,
    options: PasteOptions | None = None,
) -> OperationHandle | None:
    """Start a worker pasting the pending Path Set into ``destination``.

    Returns immediately with the started handle, or ``None`` when nothing is
    pending. The Path Set is cleared when the worker finishes.
    """
    paths, kind, generation = pending.checkout()
    if not paths:
        return None
    paste_options = options or PasteOptions()

    if kind is OperationKind.CUT:
        operation = "move"

        def work(reporter: ProgressReporter) -> OperationReport:
            return move_items_with_progress(paths, destination, paste_options, reporter)

    else:
        operation = "copy"

        def work(reporter: ProgressReporter) -> OperationReport:
            return copy_items_with_progress(paths, destination, paste_options, reporter)

    def run(reporter: ProgressReporter) -> OperationReport:
        try:
            return work(reporter)
        finally:
            pending.clear(generation)

    affected = {destination, *(path.parent for path in paths)}
    removed = paths if kind is OperationKind.CUT else ()
    # Existing destination directories are merged into, so their subtrees change.
    merged = {destination / path.name for path in paths}
    handle = OperationHandle(
        operation,
        run,
        affected_dirs=affected,
        removed_paths=removed,
        changed_trees=merged,
    )
    return handle.start()


__all__ = [
    "DEFAULT_BUFFER_SIZE",
    "PasteOptions",
    "tree_size",
    "copy_items_with_progress",
    "move_items_with_progress",
    "move_dir",
    "move_file",
    "paste_files",
]
