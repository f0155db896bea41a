"""Tests for config persistence and input sanitization.

Ensures malformed config data is safely normalized on load.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from panefm.directory_model import SortMethod, SortRule
from panefm.fileops import DEFAULT_BUFFER_SIZE, PasteOptions
from panefm.runtime import config


class ConfigBehaviorTests(unittest.TestCase):
    def test_missing_file_yields_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "missing" / "config.json"
            with mock.patch("panefm.runtime.config.CONFIG_PATH", config_path):
                loaded = config.load_file_manager_config()

            self.assertEqual(loaded.sort_rule, SortRule())
            self.assertEqual(loaded.paste_options, PasteOptions())
            self.assertEqual(loaded.log_level, "INFO")

    def test_malformed_json_and_non_object_fall_back_to_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("panefm.runtime.config.CONFIG_PATH", config_path):
                config_path.write_text("{not json", encoding="utf-8")
                self.assertEqual(config.load_config(), {})
                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config(), {})

    def test_values_are_read_and_sanitized(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("panefm.runtime.config.CONFIG_PATH", config_path):
                config.save_config(
                    {
                        "sort_method": "mtime",
                        "directories_first": False,
                        "sort_reverse": "yes",
                        "show_hidden": True,
                        "paste_skip_existing": True,
                        "buffer_size": 10,
                        "log_level": "debug",
                    }
                )
                loaded = config.load_file_manager_config()

            self.assertIs(loaded.sort_rule.method, SortMethod.MTIME)
            self.assertFalse(loaded.sort_rule.directories_first)
            self.assertFalse(loaded.sort_rule.reverse)
            self.assertTrue(loaded.sort_rule.show_hidden)
            self.assertTrue(loaded.paste_options.skip_existing)
            self.assertEqual(loaded.paste_options.buffer_size, config.MIN_BUFFER_SIZE)
            self.assertEqual(loaded.log_level, "DEBUG")

    def test_invalid_buffer_size_and_log_level_use_defaults(self) -> None:
        data = {"buffer_size": True, "log_level": "chatty"}
        self.assertEqual(config.load_paste_options(data).buffer_size, DEFAULT_BUFFER_SIZE)
        self.assertEqual(config.load_paste_options({"buffer_size": 10**12}).buffer_size, config.MAX_BUFFER_SIZE)
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("panefm.runtime.config.CONFIG_PATH", config_path):
                config.save_config(data)
                self.assertEqual(config.load_file_manager_config().log_level, "INFO")

    def test_show_hidden_round_trip_keeps_other_keys(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("panefm.runtime.config.CONFIG_PATH", config_path):
                config.save_config({"sort_method": "size"})
                config.save_show_hidden(True)

                self.assertTrue(config.load_file_manager_config().sort_rule.show_hidden)
                self.assertEqual(config.load_config().get("sort_method"), "size")


if __name__ == "__main__":
    unittest.main()
