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
    ("buy", ActivityType.BUY),
    ("sell", ActivityType.SELL),
    ("staking", ActivityType.INTEREST),
]

is_ignored = casts.contains_any("type", ["send", "receive", "convert"])


def pair(row):
    if row["type"] in (ActivityType.BUY, ActivityType.SELL):
        return f"{row['asset']}-{row['priceCurrency']}"
    return None


MAPPING = SchemaMapping(
    broker=BrokerId.COINBASE,
    columns=["id", "timestamp", "type", "asset", "quantity", "priceCurrency", "price", "subtotal", "total",
             "fees", "notes"],
    casts={
        "timestamp": casts.date(),
        "type": casts.action(ACTIONS),
        "quantity": casts.decimal,
        "price": casts.decimal,
        "subtotal": casts.decimal,
        "total": casts.decimal,
        "fees": casts.decimal,
    },
    is_ignored=is_ignored,
    type="type",
    date="timestamp",
    currency=lambda row: row["priceCurrency"] or "EUR",
    quantity="quantity",
    unit_price="price",
    amount="subtotal",
    fee="fees",
    symbol=pair,
    comment="notes",
)
