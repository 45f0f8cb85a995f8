#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from decimal import Decimal

from activity import ActivityType
from brokers import casts
from brokers.schema_mapping import SchemaMapping
from format_detector import BrokerId


ACTIONS = [
    ("buy", ActivityType.BUY),
    ("sell", ActivityType.SELL),
    ("dividend", ActivityType.DIVIDEND),
    ("interest", ActivityType.INTEREST),
    ("cost", ActivityType.FEE),
    ("fee", ActivityType.FEE),
]

is_ignored = casts.contains_any("type", ["transferin", "transferout"])


def fees(row):
    # Parqet books withheld tax separately from broker fees
    return abs(row["tax"] or Decimal(0)) + abs(row["fee"] or Decimal(0))


MAPPING = SchemaMapping(
    broker=BrokerId.PARQET,
    delimiter=";",
    columns=["datetime", "date", "time", "price", "shares", "amount", "tax", "fee", "realizedgains", "type",
             "broker", "assettype", "identifier", "wkn", "originalcurrency", "currency", "fxrate", "holding",
             "holdingname", "holdingnickname", "exchange", "avgholdingperiod"],
    casts={
        "datetime": casts.date(),
        "type": casts.action(ACTIONS, exact=True),
        "price": casts.decimal_comma,
        "shares": casts.decimal_comma,
        "amount": casts.decimal_comma,
        "tax": casts.decimal_comma,
        "fee": casts.decimal_comma,
        "currency": casts.currency,
        "originalcurrency": casts.currency,
    },
    is_ignored=is_ignored,
    type="type",
    date="datetime",
    currency=lambda row: row["currency"] or row["originalcurrency"],
    quantity="shares",
    unit_price="price",
    amount="amount",
    fee=fees,
    isin="identifier",
    name="holdingname",
)
