"""Tests for the check-out/check-in directory history cache."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from panefm.directory_model import DirectoryHistory, SortRule, build_directory_snapshot
from panefm.errors import DirectoryReadError


class _CountingBuilder:
    def __init__(self) -> None:
        self.calls: list[Path] = []

    def __call__(self, path: Path, sort_rule: SortRule):
        self.calls.append(path)
        return build_directory_snapshot(path, sort_rule)


class DirectoryHistoryTests(unittest.TestCase):
    def test_pop_or_create_returns_put_back_snapshot_without_rereading(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "a").write_text("a", encoding="utf-8")
            (root / "b").write_text("b", encoding="utf-8")
            builder = _CountingBuilder()
            history = DirectoryHistory(build_snapshot=builder)
            rule = SortRule()

            snapshot = history.pop_or_create(root, rule)
            snapshot.set_index(1)
            snapshot.entries[0].selected = True
            history.put_back(snapshot)
            (root / "c").write_text("c", encoding="utf-8")

            again = history.pop_or_create(root, rule)
            self.assertIs(again, snapshot)
            self.assertEqual(builder.calls, [root])
            self.assertEqual(again.index, 1)
            self.assertTrue(again.entries[0].selected)
            self.assertNotIn(root, history)

    def test_sort_rule_mismatch_builds_fresh_snapshot(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / ".dot").write_text("d", encoding="utf-8")
            (root / "plain").write_text("p", encoding="utf-8")
            builder = _CountingBuilder()
            history = DirectoryHistory(build_snapshot=builder)

            stale = history.pop_or_create(root, SortRule())
            history.put_back(stale)

            hidden_rule = SortRule(show_hidden=True)
            fresh = history.pop_or_create(root, hidden_rule)
            self.assertIsNot(fresh, stale)
            self.assertEqual(fresh.sort_rule, hidden_rule)
            self.assertEqual([entry.name for entry in fresh.entries], [".dot", "plain"])
            self.assertEqual(builder.calls, [root, root])
            self.assertEqual(len(history), 0)

    def test_put_back_is_last_write_wins(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            history = DirectoryHistory()
            rule = SortRule()
            first = build_directory_snapshot(root, rule)
            second = build_directory_snapshot(root, rule)

            history.put_back(first)
            history.put_back(second)
            history.put_back(None)

            self.assertEqual(len(history), 1)
            self.assertIs(history.get(root), second)

    def test_failed_read_propagates_and_leaves_no_entry(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp).resolve() / "missing"
            history = DirectoryHistory()
            with self.assertRaises(DirectoryReadError):
                history.pop_or_create(missing, SortRule())
            self.assertNotIn(missing, history)

    def test_invalidate_recursive_drops_descendants_only(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "a" / "deep").mkdir(parents=True)
            (root / "ab").mkdir()
            history = DirectoryHistory()
            rule = SortRule()
            for path in (root, root / "a", root / "a" / "deep", root / "ab"):
                history.put_back(build_directory_snapshot(path, rule))

            self.assertEqual(history.invalidate(root / "a", recursive=True), 2)
            self.assertEqual(sorted(history), sorted([root, root / "ab"]))
            self.assertEqual(history.invalidate(root), 1)
            self.assertEqual(history.invalidate(root), 0)


if __name__ == "__main__":
    unittest.main()
