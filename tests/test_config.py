"""Tests for bench.config -- persisted reporter settings."""

import json
import os
import tempfile
import unittest
from unittest import mock

from bench.config import (
    DEFAULTS,
    check_output_format,
    config_path,
    load_config,
    save_config,
    set_default_format,
)


class ConfigTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self._tmp.name, "nested", "config.json")
        patcher = mock.patch("bench.config._config_path", return_value=self.path)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        self._tmp.cleanup()

    def _write_raw(self, text):
        os.makedirs(os.path.dirname(self.path), exist_ok=True)
        with open(self.path, "w") as fh:
            fh.write(text)


class TestConfigDefaults(unittest.TestCase):
    def test_defaults(self):
        self.assertEqual(DEFAULTS, {"output": "auto", "records_file": ""})

    def test_config_path_under_home(self):
        self.assertTrue(config_path().endswith(os.path.join(".neobench", "config.json")))


class TestCheckOutputFormat(unittest.TestCase):
    def test_known(self):
        for name in ("auto", "interactive", "csv"):
            self.assertEqual(check_output_format(name), name)

    def test_unknown(self):
        with self.assertRaises(ValueError) as ctx:
            check_output_format("xml")
        self.assertIn("'xml'", str(ctx.exception))


class TestLoadConfig(ConfigTestCase):
    def test_missing_file_gives_defaults(self):
        self.assertEqual(load_config(), DEFAULTS)

    def test_saved_values_loaded(self):
        save_config({"output": "csv", "records_file": "/tmp/runs.jsonl"})
        self.assertEqual(load_config(), {"output": "csv", "records_file": "/tmp/runs.jsonl"})

    def test_partial_file_keeps_defaults(self):
        self._write_raw('{"output": "interactive"}')
        cfg = load_config()
        self.assertEqual(cfg["output"], "interactive")
        self.assertEqual(cfg["records_file"], "")

    def test_corrupt_file_gives_defaults(self):
        self._write_raw("NOT JSON")
        self.assertEqual(load_config(), DEFAULTS)

    def test_non_object_gives_defaults(self):
        self._write_raw('["csv"]')
        self.assertEqual(load_config(), DEFAULTS)

    def test_unknown_output_falls_back_to_auto(self):
        self._write_raw('{"output": "xml", "records_file": "/tmp/runs.jsonl"}')
        cfg = load_config()
        self.assertEqual(cfg["output"], "auto")
        self.assertEqual(cfg["records_file"], "/tmp/runs.jsonl")

    def test_non_string_records_file_ignored(self):
        self._write_raw('{"output": "csv", "records_file": 42}')
        cfg = load_config()
        self.assertEqual(cfg["output"], "csv")
        self.assertEqual(cfg["records_file"], "")


class TestSaveConfig(ConfigTestCase):
    def test_no_temp_file_left(self):
        save_config({"output": "csv"})
        self.assertEqual(os.listdir(os.path.dirname(self.path)), ["config.json"])

    def test_set_default_format(self):
        returned = set_default_format("interactive")
        self.assertEqual(returned, self.path)
        with open(self.path) as fh:
            self.assertEqual(json.load(fh)["output"], "interactive")

    def test_set_default_format_keeps_other_keys(self):
        save_config({"output": "csv", "records_file": "/tmp/runs.jsonl"})
        set_default_format("auto")
        self.assertEqual(load_config(), {"output": "auto", "records_file": "/tmp/runs.jsonl"})

    def test_set_default_format_rejects_unknown(self):
        with self.assertRaises(ValueError):
            set_default_format("json")
        self.assertFalse(os.path.exists(self.path))


if __name__ == "__main__":
    unittest.main()
