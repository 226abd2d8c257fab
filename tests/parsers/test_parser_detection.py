import unittest
from unittest.mock import patch
from locktree.core.exceptions import MalformedInput
from locktree.parsers import detect_lock_file, detect_parser, parse_lock_text
from locktree.parsers.cargo import CargoLockParser
from locktree.parsers.python import PoetryLockParser
from locktree.parsers.ruby import GemfileLockParser


class TestParserDetection(unittest.TestCase):

    def test_detect_by_content(self):
        self.assertIsInstance(detect_parser('[[package]]\nname = "a"\nversion = "1.0.0"\n'), CargoLockParser)
        self.assertIsInstance(detect_parser("GEM\n  specs:\n    rack (2.2.8)\n"), GemfileLockParser)
        self.assertIsInstance(
            detect_parser('[[package]]\nname = "a"\nversion = "1.0"\n\n[package.dependencies]\nb = "*"\n'),
            PoetryLockParser,
        )
        self.assertIsNone(detect_parser("hello world"))

    def test_unknown_text_is_malformed(self):
        with self.assertRaises(MalformedInput):
            parse_lock_text("not a lock file")

    def test_empty_text_is_an_empty_lock(self):
        parser, records = parse_lock_text("  \n")

        self.assertIsInstance(parser, CargoLockParser)
        self.assertEqual(records, [])

    def test_explicit_parser_skips_detection(self):
        parser, records = parse_lock_text("GEM\n  specs:\n    rack (2.2.8)\n", parser=GemfileLockParser())

        self.assertEqual(parser.name, "Bundler (Ruby)")
        self.assertEqual(records[0].package.label, "rack 2.2.8")

    @patch("locktree.parsers.os.listdir")
    def test_detect_lock_file(self, mock_listdir):
        mock_listdir.return_value = ["README.md", "Cargo.toml", "Cargo.lock"]

        parser, path = detect_lock_file("project")

        self.assertIsInstance(parser, CargoLockParser)
        self.assertEqual(path.replace("\\", "/"), "project/Cargo.lock")

    @patch("locktree.parsers.os.listdir")
    def test_detect_lock_file_none(self, mock_listdir):
        mock_listdir.return_value = ["main.py"]

        self.assertIsNone(detect_lock_file("."))
