"""Tests for the delete worker and its error aggregation."""

from __future__ import annotations

import errno
import os
import tempfile
import threading
import unittest
from pathlib import Path
from queue import Queue
from unittest import mock

from panefm.fileops import ProgressInfo, ProgressReporter, delete_files, remove_items_with_progress


class RemoveItemsTests(unittest.TestCase):
    def test_removes_files_and_trees_with_item_progress(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "tree" / "deep").mkdir(parents=True)
            (root / "tree" / "deep" / "leaf.txt").write_text("leaf", encoding="utf-8")
            (root / "file.txt").write_text("file", encoding="utf-8")
            os.symlink(root / "tree", root / "link")
            queue: Queue = Queue()

            report = remove_items_with_progress(
                [root / "link", root / "tree", root / "file.txt"],
                ProgressReporter(queue, threading.Event()),
            )

            self.assertTrue(report.ok)
            self.assertEqual(os.listdir(root), [])
            messages = [queue.get_nowait() for _ in range(queue.qsize())]
            self.assertEqual(messages, [ProgressInfo(1, 3), ProgressInfo(2, 3), ProgressInfo(3, 3)])

    def test_failure_is_recorded_and_remaining_items_are_deleted(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in ("a", "b", "c"):
                (root / name).write_text(name, encoding="utf-8")
            real_unlink = os.unlink

            def flaky_unlink(path, *args, **kwargs):
                if Path(path).name == "b":
                    raise PermissionError(errno.EACCES, "Permission denied", str(path))
                return real_unlink(path, *args, **kwargs)

            with mock.patch("panefm.fileops.delete.os.unlink", side_effect=flaky_unlink):
                report = remove_items_with_progress(
                    [root / "a", root / "b", root / "c"],
                    ProgressReporter(Queue(), threading.Event()),
                )

            self.assertFalse(report.ok)
            self.assertEqual(report.failures, [(root / "b", "Permission denied")])
            self.assertEqual(report.finished, 3)
            self.assertEqual(os.listdir(root), ["b"])
            self.assertIn("1 failed (b: Permission denied)", report.summary())

    def test_already_missing_path_counts_as_done(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            report = remove_items_with_progress([root / "ghost"], ProgressReporter(Queue(), threading.Event()))
            self.assertTrue(report.ok)
            self.assertEqual(report.finished, 1)

    def test_cancel_stops_before_next_item(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "a").write_text("a", encoding="utf-8")
            cancel = threading.Event()
            cancel.set()

            report = remove_items_with_progress([root / "a"], ProgressReporter(Queue(), cancel))

            self.assertTrue(report.cancelled)
            self.assertTrue((root / "a").exists())
            self.assertEqual(report.summary(), "delete: 0/1 done, cancelled")


class DeleteFilesTests(unittest.TestCase):
    def test_worker_streams_progress_then_finishes(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            paths = []
            for name in ("a", "b"):
                (root / name).write_text(name, encoding="utf-8")
                paths.append(root / name)

            handle = delete_files(paths)
            finished = [message.finished for message in handle.iter_progress(timeout=5.0)]
            report = handle.join(timeout=5.0)

            self.assertEqual(finished, [1, 2])
            self.assertTrue(handle.finished)
            self.assertFalse(handle.is_running())
            self.assertTrue(report.ok)
            self.assertEqual(handle.affected_dirs, frozenset({root}))
            self.assertEqual(handle.removed_paths, frozenset(paths))

    def test_crashing_worker_still_ends_the_stream(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            with mock.patch(
                "panefm.fileops.delete.remove_items_with_progress",
                side_effect=RuntimeError("boom"),
            ):
                handle = delete_files([root / "x"])
                self.assertEqual(list(handle.iter_progress(timeout=5.0)), [])
                report = handle.join(timeout=5.0)

            self.assertFalse(report.ok)
            self.assertEqual(report.failures[0][1], "boom")


if __name__ == "__main__":
    unittest.main()
