#!/usr/bin/env python3
"""
Column cast and predicate builders shared by the broker mappings.

Casts turn the raw CSV text of one column into a typed value. They raise
ValueError on bad input; SchemaMapping reports that as a ParseError with the
line and column.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from decimal import Decimal
from typing import Any

import pandas as pd

import constants as const
import util
from activity import ActivityType


# Module-level logger
logger = logging.getLogger(__name__)

# Pence quotes are reported as GBX by most brokers, the lookup service uses GBp
CURRENCY_ALIASES = {"GBX": "GBp"}


def text(value: str) -> str:
    return value.strip()


def currency(value: str) -> str:
    value = value.strip()
    return CURRENCY_ALIASES.get(value, value)


def decimal(value: str) -> Decimal | None:
    """Dot decimal amount ("1,234.56", "$(12.50)"); empty cells are None"""
    value = value.strip()
    if value in ("", "-", "N/A"):
        return None
    return util.currency_to_decimal(value)


def decimal_comma(value: str) -> Decimal | None:
    """Comma decimal amount as written by European brokers ("1.234,56")"""
    value = value.strip()
    if value in ("", "-"):
        return None
    return util.currency_to_decimal(value, decimal_separator=",")


def date(fmt: str | None = None, tz: str | None = None) -> Callable[[str], datetime]:
    """
    Build a date cast for one broker date format.

    Args:
        fmt: strptime style format, None for ISO-8601 text
        tz: Timezone for naive timestamps (defaults to const.TIMEZONE)
    """
    def cast(value: str) -> datetime:
        value = value.strip()
        if not value:
            raise ValueError("empty date")
        timestamp = pd.to_datetime(value, format=fmt)
        if timestamp.tzinfo is None:
            timestamp = timestamp.tz_localize(tz or const.TIMEZONE)
        return timestamp.to_pydatetime()

    return cast


def action(rules: Iterable[tuple[str, ActivityType]], exact: bool = False) -> Callable[[str], ActivityType | None]:
    """
    Build an action-keyword normalizer.

    Rules are checked in order against the lower-cased cell text, the first
    keyword contained in (or, with exact=True, equal to) the text wins.
    Unknown actions cast to None.
    """
    rules = [(keyword.lower(), activity_type) for keyword, activity_type in rules]

    def cast(value: str) -> ActivityType | None:
        value = value.strip().lower()
        for keyword, activity_type in rules:
            if (exact and value == keyword) or (not exact and keyword in value):
                return activity_type
        return None

    return cast


def contains_any(column: str, keywords: Iterable[str]) -> Callable[[dict[str, Any]], bool]:
    """Row predicate: the raw column text contains one of the keywords (case insensitive)"""
    keywords = [k.lower() for k in keywords]

    def predicate(row: dict[str, Any]) -> bool:
        value = str(raw_value(row, column)).lower()
        return any(k in value for k in keywords)

    return predicate


def raw_value(row: dict[str, Any], column: str) -> str:
    """Uncast text of a column, rows without a raw copy are read directly"""
    raw = getattr(row, "raw", row)
    value = raw.get(column)
    return "" if value is None else str(value)


def any_of(*predicates: Callable[[dict[str, Any]], bool]) -> Callable[[dict[str, Any]], bool]:
    return lambda row: any(p(row) for p in predicates)


def is_blank(column: str) -> Callable[[dict[str, Any]], bool]:
    return lambda row: raw_value(row, column) == ""


def constant(value: Any) -> Callable[[dict[str, Any]], Any]:
    return lambda row: value


def never(row: dict[str, Any]) -> bool:
    return False


def optional(cast: Callable[[str], Any]) -> Callable[[str], Any]:
    """Wrap a cast so that an empty cell casts to None"""
    def wrapped(value: str) -> Any:
        if not value.strip():
            return None
        return cast(value)

    return wrapped
