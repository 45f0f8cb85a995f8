#!/usr/bin/env python3
"""
CLI Tests

Runs the Click commands in-process with CliRunner. The lookup service is
replaced by an in-memory provider.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import sys
import os
# Add src to path for imports (needed when running test file directly)
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

import json
import tempfile
from unittest.mock import patch

from click.testing import CliRunner

import constants as const
from cli import cli
from converter import ConversionLock, Converter
from format_detector import FormatDetector
from tests.test_data_factory import TestDataFactory


def fake_converter(account_id=None):
    provider = TestDataFactory.provider_for("AAPL", "MSFT", "VTI", "KO", "JNJ")
    return Converter(provider=provider, account_id=account_id, tag_ids=[],
                     detector=FormatDetector(force_degiro_v3=False), lock=ConversionLock())


class TestCliCommands:
    """Test informational commands"""

    def setup_method(self):
        self.runner = CliRunner()

    def test_version(self):
        result = self.runner.invoke(cli, ['version'])
        assert result.exit_code == 0
        assert f"v{const.VERSION}" in result.output

    def test_formats(self):
        result = self.runner.invoke(cli, ['formats'])
        assert result.exit_code == 0
        assert "schwab" in result.output
        assert "degiro-v3" in result.output
        assert "t212" in result.output

    def test_detect(self):
        result = self.runner.invoke(cli, ['detect', TestDataFactory.fixture_path('schwab_sample.csv')])
        assert result.exit_code == 0
        assert "schwab" in result.output

    def test_detect_unknown(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'notes.csv')
            with open(path, 'w', encoding='utf-8') as f:
                f.write("hello,world\n1,2\n")
            result = self.runner.invoke(cli, ['detect', path])
        assert result.exit_code == 1
        assert "Unable to detect" in result.output


class TestCliConvert:
    """Test the convert command"""

    def setup_method(self):
        self.runner = CliRunner()

    def test_convert(self):
        with tempfile.TemporaryDirectory() as tmp, patch('cli.Converter', fake_converter):
            result = self.runner.invoke(cli, [
                'convert', TestDataFactory.fixture_path('schwab_sample.csv'),
                '--account-id', 'account-1', '--output-dir', tmp, '--no-split',
            ])
            files = os.listdir(tmp)
            with open(os.path.join(tmp, files[0]), encoding='utf-8') as f:
                data = json.load(f)

        assert result.exit_code == 0, result.output
        assert "CONVERSION RESULTS" in result.output
        assert "TOTAL" in result.output
        assert len(files) == 1
        assert files[0].startswith("tracker-schwab-")
        assert len(data["activities"]) == 18

    def test_convert_split(self):
        with tempfile.TemporaryDirectory() as tmp, patch('cli.Converter', fake_converter):
            result = self.runner.invoke(cli, [
                'convert', TestDataFactory.fixture_path('schwab_sample.csv'), '--format', 'schwab',
                '--account-id', 'account-1', '--output-dir', tmp, '--split',
            ])
            files = os.listdir(tmp)

        assert result.exit_code == 0, result.output
        assert len(files) == 1

    def test_convert_without_account(self):
        with patch('cli.Converter', fake_converter), patch.object(const, 'ACCOUNT_ID', None):
            result = self.runner.invoke(cli, ['convert', TestDataFactory.fixture_path('schwab_sample.csv')])

        assert result.exit_code == 1
        assert "CONFIG_ERROR" in result.output

    def test_convert_unknown_format(self):
        with patch('cli.Converter', fake_converter):
            result = self.runner.invoke(cli, [
                'convert', TestDataFactory.fixture_path('schwab_sample.csv'),
                '--format', 'fidelity', '--account-id', 'account-1',
            ])

        assert result.exit_code == 1
        assert "UNKNOWN_FORMAT" in result.output
