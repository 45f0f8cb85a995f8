#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from activity import ActivityType
from brokers import casts
from brokers.schema_mapping import SchemaMapping
from format_detector import BrokerId


# Checked in order, "Reinvest Shares" is a buy while "Reinvest Dividend" is income
ACTIONS = [
    ("reinvest shares", ActivityType.BUY),
    ("buy", ActivityType.BUY),
    ("sell", ActivityType.SELL),
    ("dividend", ActivityType.DIVIDEND),
    ("qual", ActivityType.DIVIDEND),
    ("reinvest", ActivityType.DIVIDEND),
    ("advisor fee", ActivityType.FEE),
    ("interest", ActivityType.INTEREST),
]

parse_date = casts.date("%m/%d/%Y")


def settlement_date(value: str):
    # "08/25/2025 as of 08/22/2025"
    return parse_date(value.split(" ", 1)[0])


def is_ignored(row) -> bool:
    action = casts.raw_value(row, "action").lower()
    return (action.startswith("wire")
            or "credit" in action
            or "journal" in action
            or casts.raw_value(row, "date").lower() == "transactions total")


MAPPING = SchemaMapping(
    broker=BrokerId.SCHWAB,
    columns=["date", "action", "symbol", "description", "quantity", "price", "fees", "amount"],
    casts={
        "date": settlement_date,
        "action": casts.action(ACTIONS),
        "quantity": casts.decimal,
        "price": casts.decimal,
        "fees": casts.decimal,
        "amount": casts.decimal,
    },
    is_ignored=is_ignored,
    type="action",
    date="date",
    currency=casts.constant("USD"),
    quantity="quantity",
    unit_price="price",
    amount="amount",
    fee="fees",
    ticker="symbol",
    name="description",
)
