#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import sys
import os
# Add src to path for imports (needed when running test file directly)
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

import unittest
import logging
from decimal import Decimal
from util import currency_to_decimal, round_decimal, get_logger, set_log_level, setup_logger


class TestCurrencyToDecimal(unittest.TestCase):
    """Test parsing of broker amounts"""

    def test_plain(self):
        self.assertEqual(currency_to_decimal("1234.56"), Decimal("1234.56"))

    def test_dollar_sign_and_thousands(self):
        self.assertEqual(currency_to_decimal("$1,234.56"), Decimal("1234.56"))

    def test_negative(self):
        self.assertEqual(currency_to_decimal("-$1852.00"), Decimal("-1852.00"))

    def test_accounting_negative(self):
        self.assertEqual(currency_to_decimal("(12.50)"), Decimal("-12.50"))
        self.assertEqual(currency_to_decimal("$(12.50)"), Decimal("-12.50"))

    def test_plus_sign(self):
        self.assertEqual(currency_to_decimal("+3.10"), Decimal("3.10"))

    def test_currency_codes(self):
        self.assertEqual(currency_to_decimal("EUR 10.00"), Decimal("10.00"))
        self.assertEqual(currency_to_decimal("£5"), Decimal("5"))

    def test_comma_decimal(self):
        self.assertEqual(currency_to_decimal("1.234,56", decimal_separator=","), Decimal("1234.56"))
        self.assertEqual(currency_to_decimal("-1,88", decimal_separator=","), Decimal("-1.88"))

    def test_swiss_thousands(self):
        self.assertEqual(currency_to_decimal("1'000.50"), Decimal("1000.50"))

    def test_invalid(self):
        with self.assertRaises(ValueError):
            currency_to_decimal("abc")
        with self.assertRaises(ValueError):
            currency_to_decimal("")


class TestRoundDecimal(unittest.TestCase):

    def test_half_up(self):
        self.assertEqual(round_decimal(Decimal("105.5005"), 3), Decimal("105.501"))
        self.assertEqual(round_decimal(Decimal("2.5"), 0), Decimal("3"))

    def test_precision(self):
        self.assertEqual(round_decimal(Decimal("1") / Decimal("3"), 6), Decimal("0.333333"))


class TestLoggerFunctions(unittest.TestCase):
    """Test logger-related functions"""

    def test_get_logger(self):
        """Test get_logger() returns logger instance"""
        logger = get_logger('test_module')
        self.assertIsInstance(logger, logging.Logger)
        self.assertEqual(logger.name, 'test_module')

    def test_setup_logger_with_name(self):
        """Test setup_logger() with explicit name"""
        # Clear any existing handlers
        test_logger = logging.getLogger('test_setup')
        test_logger.handlers.clear()

        logger = setup_logger('test_setup', level='DEBUG', console=False)
        self.assertIsInstance(logger, logging.Logger)
        self.assertEqual(logger.name, 'test_setup')
        self.assertGreater(len(logger.handlers), 0)

    def test_setup_logger_prevents_duplicate_handlers(self):
        """Test that setup_logger doesn't add duplicate handlers"""
        test_logger = logging.getLogger('test_dup')
        test_logger.handlers.clear()

        # First call
        logger1 = setup_logger('test_dup', level='INFO', console=False)
        handler_count_1 = len(logger1.handlers)

        # Second call should return same logger without adding handlers
        logger2 = setup_logger('test_dup', level='INFO', console=False)
        handler_count_2 = len(logger2.handlers)

        self.assertEqual(handler_count_1, handler_count_2)

    def test_set_log_level(self):
        """Test set_log_level() changes log level"""
        root_logger = logging.getLogger()
        original_level = root_logger.level

        set_log_level('DEBUG')
        self.assertEqual(root_logger.level, logging.DEBUG)

        set_log_level('WARNING')
        self.assertEqual(root_logger.level, logging.WARNING)

        # Restore original level
        root_logger.setLevel(original_level)


if __name__ == '__main__':
    unittest.main()
