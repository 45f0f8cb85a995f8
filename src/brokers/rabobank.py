#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from activity import ActivityType
from brokers import casts
from brokers.schema_mapping import SchemaMapping
from format_detector import BrokerId


# "verkoop fondsen" has to be checked before "koop fondsen"
ACTIONS = [
    ("verkoop fondsen", ActivityType.SELL),
    ("koop fondsen", ActivityType.BUY),
    ("dividend", ActivityType.DIVIDEND),
    ("rente", ActivityType.INTEREST),
    ("tarieven", ActivityType.FEE),
]

is_ignored = casts.contains_any("type", ["storting", "opname"])


def label(row):
    # Service fees are booked under the fee schedule name
    if row["type"] == ActivityType.FEE:
        return casts.raw_value(row, "type")
    return row["name"] or None


def amount(row):
    if row["type"] not in (None, ActivityType.BUY, ActivityType.SELL):
        return row["totalAmount"]
    return None


MAPPING = SchemaMapping(
    broker=BrokerId.RABOBANK,
    delimiter=";",
    columns=["account", "name", "date", "type", "currency", "volume", "price", "priceCurrency", "costs",
             "value", "totalAmount", "isin", "time", "exchange"],
    casts={
        "date": casts.date("%d-%m-%Y"),
        "type": casts.action(ACTIONS),
        "volume": casts.decimal_comma,
        "price": casts.decimal_comma,
        "costs": casts.decimal_comma,
        "totalAmount": casts.decimal_comma,
        "currency": casts.currency,
    },
    is_ignored=is_ignored,
    type="type",
    date="date",
    currency="currency",
    quantity="volume",
    unit_price="price",
    amount=amount,
    fee="costs",
    isin="isin",
    name=label,
)
