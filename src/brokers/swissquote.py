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
    ("dividend", ActivityType.DIVIDEND),
    ("custody fees", ActivityType.FEE),
    ("interest", ActivityType.INTEREST),
]

is_ignored = casts.contains_any("transaction", ["credit", "debit", "payment", "tax statement"])


def income_amount(row):
    if row["transaction"] in (ActivityType.DIVIDEND, ActivityType.FEE, ActivityType.INTEREST):
        return row["netAmount"]
    return None


MAPPING = SchemaMapping(
    broker=BrokerId.SWISSQUOTE,
    delimiter=";",
    columns=["date", "orderNo", "transaction", "symbol", "name", "isin", "quantity", "unitPrice", "costs",
             "accruedInterest", "netAmount", "balance", "currency"],
    casts={
        "date": casts.date("%d-%m-%Y %H:%M"),
        "transaction": casts.action(ACTIONS),
        "quantity": casts.decimal,
        "unitPrice": casts.decimal,
        "costs": casts.decimal,
        "netAmount": casts.decimal,
        "currency": casts.currency,
    },
    is_ignored=is_ignored,
    type="transaction",
    date="date",
    currency="currency",
    quantity="quantity",
    unit_price="unitPrice",
    amount=income_amount,
    fee="costs",
    isin="isin",
    ticker="symbol",
    name="name",
)
