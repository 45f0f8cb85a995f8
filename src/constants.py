#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import os
import pathlib

from dotenv import load_dotenv


PROJECT_ROOT = pathlib.Path(__file__).parent.parent.absolute()

# Logging
LOG_FILE = "activity-import.log"
CONVERTER_LOG_FILE = "convert.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5


# App Version
VERSION = 0.3
SCHEMA_VERSION = "v0"


def _env_flag(name: str) -> bool:
    return str(os.getenv(name, "")).strip().lower() == "true"


def _env_list(name: str) -> list[str]:
    value = os.getenv(name, "")
    return [item.strip() for item in value.split(",") if item.strip()]


load_dotenv()

# PORTFOLIO TRACKER
TRACKER_API_URL = os.getenv("TRACKER_API_URL", "http://localhost:3333")
TRACKER_API_SECRET = os.getenv("TRACKER_API_SECRET")
ACCOUNT_ID = os.getenv("TRACKER_ACCOUNT_ID")
TAG_IDS = _env_list("TRACKER_TAG_IDS")
SPLIT_OUTPUT = _env_flag("TRACKER_SPLIT_OUTPUT")
SPLIT_SIZE = 25

# INSTRUMENT LOOKUP
LOOKUP_TIMEOUT = 10  # seconds, per HTTP request
MAX_AUTH_ATTEMPTS = 3
ISIN_OVERRIDE_FILE = os.getenv("ISIN_OVERRIDE_FILE", "isin-overrides.txt")
PREFERRED_EXCHANGE_POSTFIX = os.getenv("PREFERRED_EXCHANGE_POSTFIX")

# FORMAT DETECTION
DETECTION_THRESHOLD = 0.7
DEGIRO_FORCE_V3 = _env_flag("DEGIRO_FORCE_V3")

# BROKERS
XTB_ACCOUNT_CURRENCY = os.getenv("XTB_ACCOUNT_CURRENCY", "EUR")
TIMEZONE = os.getenv("EXPORT_TIMEZONE", "UTC")

# OUTPUT
OUTPUT_DIR = os.getenv("OUTPUT_DIR", str(PROJECT_ROOT / "output"))
