"""Tests for environment-driven settings."""

import logging
import unittest

import settings


class TestLogLevel(unittest.TestCase):

    def test_known_levels(self):
        self.assertEqual(settings.log_level("DEBUG"), logging.DEBUG)
        self.assertEqual(settings.log_level("WARNING"), logging.WARNING)

    def test_unknown_name_falls_back_to_info(self):
        self.assertEqual(settings.log_level("VERBOSE"), logging.INFO)

    def test_non_level_logging_attribute_falls_back_to_info(self):
        self.assertEqual(settings.log_level("BASIC_FORMAT"), logging.INFO)


class TestReadTimeout(unittest.TestCase):

    def test_unset_means_no_timeout(self):
        self.assertIsNone(settings._read_timeout(None))
        self.assertIsNone(settings._read_timeout(""))

    def test_invalid_values(self):
        self.assertIsNone(settings._read_timeout("soon"))
        self.assertIsNone(settings._read_timeout("0"))

    def test_seconds(self):
        self.assertEqual(settings._read_timeout("2.5"), 2.5)


if __name__ == "__main__":
    unittest.main()
