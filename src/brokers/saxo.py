#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import re

from activity import ActivityType
from brokers import casts
from brokers.schema_mapping import SchemaMapping
from format_detector import BrokerId


# "Bought 10 @ 152.30 USD"
EVENT_TRADE = re.compile(r"(\d+)\s+@\s+([\d.]+)")

is_ignored = casts.contains_any("event", ["deposit", "withdrawal"])


def activity_type(row):
    if "fee" in row["event"].lower():
        return ActivityType.FEE
    if row["type"].lower() == "corporate action":
        return ActivityType.DIVIDEND
    if row["amount"] is None:
        return None
    return ActivityType.BUY if row["amount"] < 0 else ActivityType.SELL


def event_detail(group: int):
    def field(row):
        match = EVENT_TRADE.search(row["event"])
        return casts.decimal(match.group(group)) if match else None
    return field


def ticker(row):
    # "AAPL:xnas"
    return row["instrumentSymbol"].split(":")[0] or None


def name(row):
    if activity_type(row) == ActivityType.FEE:
        return row["event"]
    return row["instrument"] or None


MAPPING = SchemaMapping(
    broker=BrokerId.SAXO,
    columns=["clientId", "tradeDate", "valueDate", "type", "instrument", "instrumentIsin", "instrumentCurrency",
             "exchangeDescription", "instrumentSymbol", "event", "amount", "orderId", "conversionRate"],
    casts={
        "tradeDate": casts.date(),
        "amount": casts.decimal,
        "instrumentCurrency": casts.currency,
    },
    is_ignored=is_ignored,
    type=activity_type,
    date="tradeDate",
    currency="instrumentCurrency",
    quantity=event_detail(1),
    unit_price=event_detail(2),
    amount="amount",
    isin="instrumentIsin",
    ticker=ticker,
    name=name,
)
