"""
Tests for logging setup.
"""

import logging
import tempfile
import unittest
from pathlib import Path

from wikipath.log import parse_level, setup_logging


class TestParseLevel(unittest.TestCase):
    def test_known_levels(self):
        self.assertEqual(parse_level("info"), logging.INFO)
        self.assertEqual(parse_level("DEBUG"), logging.DEBUG)
        self.assertEqual(parse_level(" warning "), logging.WARNING)

    def test_unknown_level(self):
        with self.assertRaises(ValueError):
            parse_level("verbose")


class TestSetupLogging(unittest.TestCase):
    def tearDown(self):
        logger = logging.getLogger("wikipath")
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)

    def test_console_only(self):
        setup_logging("warning")
        logger = logging.getLogger("wikipath")
        self.assertEqual(logger.level, logging.WARNING)
        self.assertEqual(len(logger.handlers), 1)

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logging("info")
        setup_logging("info")
        self.assertEqual(len(logging.getLogger("wikipath").handlers), 1)

    def test_log_file_receives_debug(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_file = Path(tmp) / "logs" / "search.log"
            setup_logging("error", str(log_file))
            logger = logging.getLogger("wikipath")
            logger.debug("fetching %s", "https://en.wikipedia.org/wiki/Moth")
            for handler in logger.handlers:
                handler.flush()
            self.assertIn("fetching https://en.wikipedia.org/wiki/Moth", log_file.read_text(encoding="utf-8"))
            self.tearDown()
