"""Worker-thread progress protocol shared by paste and delete.

A worker streams ``ProgressInfo`` messages over one FIFO queue to exactly one
consumer, then a ``None`` sentinel once its ``OperationReport`` is final.
Consumers either poll (``OperationHandle.poll``) from the event loop or block
(``OperationHandle.iter_progress``).
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from queue import Empty, Queue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressInfo:
    """Bytes or items finished out of ``total`` at one point in time."""

    finished: int
    total: int

    @property
    def fraction(self) -> float:
        if self.total <= 0:
            return 1.0
        return max(0.0, min(1.0, self.finished / self.total))


@dataclass
class OperationReport:
    """Aggregate outcome of one worker batch."""

    operation: str
    total: int = 0
    finished: int = 0
    failures: list[tuple[Path, str]] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    cancelled: bool = False
    failed_items: int = 0
    skipped_items: int = 0

    @property
    def ok(self) -> bool:
        return not self.failures and not self.cancelled

    def record_failure(self, path: Path, exc: BaseException) -> None:
        if isinstance(exc, OSError) and exc.strerror:
            message = exc.strerror
        else:
            message = str(exc) or type(exc).__name__
        self.failures.append((path, message))

    def finish_item(self, path: Path, failures_before: int) -> None:
        """Count one top-level item as failed, skipped, or done.

        Failures recorded below a directory item mark the whole item failed;
        children skipped inside a merged directory leave the item done.
        """
        self.finished += 1
        if len(self.failures) > failures_before:
            self.failed_items += 1
        elif self.skipped and self.skipped[-1] == path:
            self.skipped_items += 1

    def summary(self) -> str:
        """Return a one-line status message describing the outcome."""
        done = self.finished - self.failed_items - self.skipped_items
        text = f"{self.operation}: {done}/{self.total} done"
        if self.skipped:
            text += f", {len(self.skipped)} skipped"
        if self.failures:
            first_path, first_message = self.failures[0]
            text += f", {len(self.failures)} failed ({first_path.name or first_path}: {first_message})"
        if self.cancelled:
            text += ", cancelled"
        return text


class ProgressReporter:
    """Producer side of one operation's progress channel."""

    def __init__(self, queue: Queue[ProgressInfo | None], cancel_event: threading.Event) -> None:
        self._queue = queue
        self._cancel_event = cancel_event

    def report(self, finished: int, total: int) -> None:
        self._queue.put(ProgressInfo(finished=finished, total=total))

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()


OperationWork = Callable[[ProgressReporter], OperationReport]


class OperationHandle:
    """Consumer side of one worker: progress receiver, join handle, cancel flag."""

    def __init__(
        self,
        operation: str,
        work: OperationWork,
        *,
        affected_dirs: Iterable[Path] = (),
        removed_paths: Iterable[Path] = (),
        changed_trees: Iterable[Path] = (),
    ) -> None:
        self.operation = operation
        self.affected_dirs = frozenset(affected_dirs)
        self.removed_paths = frozenset(removed_paths)
        self.changed_trees = frozenset(changed_trees)
        self.last_progress: ProgressInfo | None = None
        self._work = work
        self._queue: Queue[ProgressInfo | None] = Queue()
        self._cancel_event = threading.Event()
        self._report: OperationReport | None = None
        self._drained = False
        self._thread = threading.Thread(
            target=self._run,
            name=f"panefm-{operation}",
            daemon=True,
        )

    def _run(self) -> None:
        reporter = ProgressReporter(self._queue, self._cancel_event)
        try:
            report = self._work(reporter)
        except Exception as exc:
            logger.exception("%s worker crashed", self.operation)
            report = OperationReport(operation=self.operation)
            report.record_failure(Path(), exc)
        self._report = report
        self._queue.put(None)

    def start(self) -> OperationHandle:
        self._thread.start()
        return self

    def cancel(self) -> None:
        """Ask the worker to stop before its next item."""
        self._cancel_event.set()

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def finished(self) -> bool:
        """True once the consumer has received the end-of-stream sentinel."""
        return self._drained

    @property
    def report(self) -> OperationReport | None:
        return self._report

    def is_running(self) -> bool:
        return not self._drained

    def poll(self) -> ProgressInfo | None:
        """Drain queued messages without blocking; return the newest one."""
        latest: ProgressInfo | None = None
        while not self._drained:
            try:
                message = self._queue.get_nowait()
            except Empty:
                break
            if message is None:
                self._drained = True
                break
            latest = message
        if latest is not None:
            self.last_progress = latest
        return latest

    def iter_progress(self, timeout: float | None = None) -> Iterator[ProgressInfo]:
        """Block on the channel yielding each message until the worker finishes.

        ``timeout`` bounds each individual wait and raises ``queue.Empty``
        when exceeded.
        """
        while not self._drained:
            message = self._queue.get(timeout=timeout)
            if message is None:
                self._drained = True
                return
            self.last_progress = message
            yield message

    def join(self, timeout: float | None = None) -> OperationReport | None:
        self._thread.join(timeout)
        return self._report


__all__ = [
    "ProgressInfo",
    "OperationReport",
    "ProgressReporter",
    "OperationHandle",
    "OperationWork",
]
