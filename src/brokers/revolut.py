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
    ("stock split", ActivityType.BUY),
    ("sell", ActivityType.SELL),
    ("dividend", ActivityType.DIVIDEND),
    ("fee", ActivityType.FEE),
]

is_ignored = casts.contains_any("type", ["transfer from", "withdrawal", "top-up"])


def currency(row):
    # The legacy export predates multi-currency accounts and is always USD
    return row.get("currency") or "USD"


def fee_label(row):
    if row["type"] == ActivityType.FEE:
        return "Revolut fee"
    return None


def dividend_amount(row):
    if row["type"] in (ActivityType.DIVIDEND, ActivityType.FEE):
        return row["totalAmount"]
    return None


MAPPING = SchemaMapping(
    broker=BrokerId.REVOLUT,
    columns=["date", "ticker", "type", "quantity", "pricePerShare", "totalAmount", "currency", "fxRate"],
    alternate_columns=[
        ["ticker", "type", "quantity", "pricePerShare", "totalAmount", "fees", "date"],
    ],
    casts={
        "date": casts.date(),
        "type": casts.action(ACTIONS),
        "quantity": casts.decimal,
        "pricePerShare": casts.decimal,
        "totalAmount": casts.decimal,
        "fees": casts.decimal,
    },
    is_ignored=is_ignored,
    type="type",
    date="date",
    currency=currency,
    quantity="quantity",
    unit_price="pricePerShare",
    amount=dividend_amount,
    fee="fees",
    ticker="ticker",
    name=fee_label,
)
