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
    ("fee", ActivityType.FEE),
]

is_ignored = casts.contains_any("category", ["deposit", "withdraw"])


def cash_flow(row):
    if row["category"] in (ActivityType.DIVIDEND, ActivityType.FEE):
        return row["cashFlow"]
    return None


def fee_label(row):
    # Fee rows carry no asset, they are booked under the category text
    if row["category"] == ActivityType.FEE:
        return casts.raw_value(row, "category")
    return row["assetName"] or None


MAPPING = SchemaMapping(
    broker=BrokerId.FINPENSION,
    delimiter=";",
    columns=["date", "category", "assetName", "isin", "numberOfShares", "assetCurrency", "currencyRate",
             "assetPriceInChf", "cashFlow", "balance"],
    casts={
        "date": casts.date("%Y-%m-%d"),
        "category": casts.action(ACTIONS),
        "numberOfShares": casts.decimal,
        "assetPriceInChf": casts.decimal,
        "cashFlow": casts.decimal,
        "assetCurrency": casts.currency,
    },
    is_ignored=is_ignored,
    type="category",
    date="date",
    currency=lambda row: row["assetCurrency"] or "CHF",
    quantity="numberOfShares",
    unit_price="assetPriceInChf",
    amount=cash_flow,
    isin="isin",
    name=fee_label,
)
