# -*- coding: utf-8 -*-
"""Tests for utils/logging.py"""
from __future__ import annotations

import logging
import unittest

from ngx_i18n_scan.utils.logging import (
    LOGGER_NAME,
    _level_from_string,
    configure_logging,
    get_scan_logger,
    shorten,
)


class TestLevels(unittest.TestCase):

    def setUp(self):
        logger = logging.getLogger(LOGGER_NAME)
        self.addCleanup(logger.setLevel, logger.level)

    def test_level_from_string(self):
        self.assertEqual(_level_from_string("debug"), logging.DEBUG)
        self.assertEqual(_level_from_string("INFO"), logging.INFO)
        self.assertEqual(_level_from_string("nonsense"), logging.WARNING)
        self.assertEqual(_level_from_string(None, logging.ERROR), logging.ERROR)

    def test_single_handler(self):
        logger = get_scan_logger()
        self.assertIs(get_scan_logger(), logger)
        self.assertEqual(len(logger.handlers), 1)

    def test_configure_logging(self):
        self.assertEqual(configure_logging("ERROR").level, logging.ERROR)
        self.assertEqual(configure_logging("ERROR", verbose=True).level, logging.DEBUG)


class TestShorten(unittest.TestCase):

    def test_collapses_whitespace(self):
        self.assertEqual(shorten("Read the guide\n  <b>now</b>"), "Read the guide <b>now</b>")

    def test_truncates(self):
        out = shorten("x" * 100, limit=10)
        self.assertTrue(out.startswith("x" * 10))
        self.assertTrue(out.endswith("(truncated)"))

    def test_none(self):
        self.assertEqual(shorten(None), "<none>")


if __name__ == "__main__":
    unittest.main()
