"""Tests for the pending cut/copy Path Set and Operation Kind."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from panefm.directory_model import SortRule, build_directory_snapshot
from panefm.fileops import OperationKind, PendingOperation, collect_selected_paths


def _listing(root: Path, names: tuple[str, ...]):
    for name in names:
        (root / name).write_text(name, encoding="utf-8")
    return build_directory_snapshot(root, SortRule())


class CollectSelectedPathsTests(unittest.TestCase):
    def test_selected_entries_win_over_cursor(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            snapshot = _listing(root, ("a", "b", "c"))
            snapshot.entries[2].selected = True
            snapshot.entries[0].selected = True
            snapshot.set_index(1)

            self.assertEqual(collect_selected_paths(snapshot), [root / "a", root / "c"])

    def test_falls_back_to_cursor_entry(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            snapshot = _listing(root, ("a", "b"))
            snapshot.set_index(1)
            self.assertEqual(collect_selected_paths(snapshot), [root / "b"])

    def test_empty_listing_yields_none(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            snapshot = build_directory_snapshot(Path(tmp).resolve(), SortRule())
            self.assertIsNone(collect_selected_paths(snapshot))
            self.assertIsNone(collect_selected_paths(None))


class PendingOperationTests(unittest.TestCase):
    def test_marking_twice_is_idempotent(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            snapshot = _listing(root, ("a", "b"))
            snapshot.select_all()
            pending = PendingOperation()

            self.assertTrue(pending.mark_for_copy(snapshot))
            once = pending.paths
            self.assertTrue(pending.mark_for_copy(snapshot))
            self.assertEqual(pending.paths, once)
            self.assertIs(pending.kind, OperationKind.COPY)

    def test_cut_replaces_previous_set_and_kind(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            snapshot = _listing(root, ("a", "b"))
            pending = PendingOperation()

            pending.mark_for_copy(snapshot)
            snapshot.set_index(1)
            self.assertTrue(pending.mark_for_cut(snapshot))
            self.assertEqual(pending.paths, [root / "b"])
            self.assertIs(pending.kind, OperationKind.CUT)

    def test_nothing_to_mark_is_a_noop(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            full = _listing(root, ("a",))
            empty_dir = root / "empty"
            empty_dir.mkdir()
            empty = build_directory_snapshot(empty_dir, SortRule())
            pending = PendingOperation()
            pending.mark_for_copy(full)

            self.assertFalse(pending.mark_for_cut(empty))
            self.assertEqual(pending.paths, [root / "a"])
            self.assertIs(pending.kind, OperationKind.COPY)

    def test_clear_skips_when_a_newer_mark_happened(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            snapshot = _listing(root, ("a", "b"))
            pending = PendingOperation()
            pending.mark_for_copy(snapshot)
            _paths, _kind, generation = pending.checkout()

            snapshot.set_index(1)
            pending.mark_for_cut(snapshot)
            self.assertFalse(pending.clear(generation))
            self.assertEqual(pending.paths, [root / "b"])

            _paths, _kind, generation = pending.checkout()
            self.assertTrue(pending.clear(generation))
            self.assertTrue(pending.is_empty())


if __name__ == "__main__":
    unittest.main()
