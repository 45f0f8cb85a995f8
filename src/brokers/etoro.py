#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from activity import ActivityType
from brokers import casts
from brokers.schema_mapping import SchemaMapping
from format_detector import BrokerId


ACTIONS = [
    ("open position", ActivityType.BUY),
    ("position closed", ActivityType.SELL),
    ("dividend", ActivityType.DIVIDEND),
    ("interest", ActivityType.INTEREST),
    ("fee", ActivityType.FEE),
    ("refund", ActivityType.REFUND),
]

is_ignored = casts.contains_any("type", ["deposit", "withdraw", "conversion"])


def amount(value: str):
    # "(12,50)" is a plain 12.50, the sign is carried by the type
    return casts.decimal(value.replace("(", "").replace(")", "").replace(",", "."))


def units(value: str):
    # Cash movements have "-" units
    if value.strip() == "-":
        return casts.decimal("1")
    return casts.decimal(value)


def detail(part: int):
    # Details read "AAPL/USD"
    def field(row):
        if row["type"] is None or not row["type"].needs_instrument:
            return None
        pieces = row["details"].split("/")
        return pieces[part].strip() if len(pieces) > part and pieces[part].strip() else None
    return field


def currency(row):
    value = detail(1)(row)
    return casts.currency(value) if value else "USD"


def comment(row):
    if row["type"] in (ActivityType.FEE, ActivityType.REFUND):
        return f"{casts.raw_value(row, 'type').upper()} {row['assetType']} {row['details']}"
    return None


MAPPING = SchemaMapping(
    broker=BrokerId.ETORO,
    columns=["date", "type", "details", "amount", "units", "realizedEquityChange", "realizedEquity",
             "balance", "positionId", "assetType", "nwa"],
    casts={
        "date": casts.date("%d/%m/%Y %H:%M:%S"),
        "type": casts.action(ACTIONS),
        "amount": amount,
        "units": units,
    },
    is_ignored=is_ignored,
    type="type",
    date="date",
    currency=currency,
    quantity="units",
    amount="amount",
    ticker=detail(0),
    comment=comment,
)
