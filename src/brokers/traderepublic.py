#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from activity import ActivityType
from brokers import casts
from brokers.schema_mapping import SchemaMapping
from format_detector import BrokerId


# Dutch and English account statements
ACTIONS = [
    ("dividend", ActivityType.DIVIDEND),
    ("verkoop", ActivityType.SELL),
    ("sell", ActivityType.SELL),
    ("aankoop", ActivityType.BUY),
    ("buy", ActivityType.BUY),
]

is_ignored = casts.contains_any("transactionType", ["onttrekking", "storting", "deposit", "withdrawal"])


MAPPING = SchemaMapping(
    broker=BrokerId.TRADEREPUBLIC,
    delimiter=";",
    columns=["date", "transactionType", "value", "note", "isin", "amount", "costs", "tax"],
    casts={
        "date": casts.date("%Y-%m-%d"),
        "transactionType": casts.action(ACTIONS),
        "value": casts.decimal_comma,
        "amount": casts.decimal_comma,
        "costs": casts.decimal_comma,
    },
    is_ignored=is_ignored,
    type="transactionType",
    date="date",
    currency=casts.constant("EUR"),
    quantity="amount",
    amount="value",
    fee="costs",
    isin="isin",
    name="note",
    price_precision=2,
)
