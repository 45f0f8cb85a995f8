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
    ("köp", ActivityType.BUY),
    ("sälj", ActivityType.SELL),
    ("utdelning", ActivityType.DIVIDEND),
    ("ränta", ActivityType.INTEREST),
    ("övrigt", ActivityType.FEE),
    ("källskatt", ActivityType.FEE),
]

is_ignored = casts.contains_any("type", ["insättning", "uttag"])

normalize_action = casts.action(ACTIONS)


def activity_type(row):
    action = normalize_action(row["type"])
    # "Återbetalning" of a fee is income
    if action == ActivityType.FEE and "terbetalning" in row["description"].lower():
        return ActivityType.INTEREST
    return action


def currency(row):
    if activity_type(row) in (ActivityType.FEE, ActivityType.INTEREST):
        return row["currency"] or "SEK"
    return row["instrumentCurrency"] or row["currency"] or "SEK"


MAPPING = SchemaMapping(
    broker=BrokerId.AVANZA,
    delimiter=";",
    columns=["date", "account", "type", "description", "quantity", "price", "amount", "currency", "fee",
             "exchangeRate", "instrumentCurrency", "isin", "result"],
    casts={
        "date": casts.date("%Y-%m-%d"),
        "quantity": casts.decimal_comma,
        "price": casts.decimal_comma,
        "amount": casts.decimal_comma,
        "fee": casts.decimal_comma,
        "currency": casts.currency,
        "instrumentCurrency": casts.currency,
    },
    is_ignored=is_ignored,
    type=activity_type,
    date="date",
    currency=currency,
    quantity="quantity",
    unit_price="price",
    amount="amount",
    fee="fee",
    isin="isin",
    name="description",
    comment="description",
)
