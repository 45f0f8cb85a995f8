#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import pandas as pd

from activity import ActivityType
from brokers import casts
from brokers.schema_mapping import SchemaMapping
from format_detector import BrokerId


ACTIONS = [
    ("buy", ActivityType.BUY),
    ("sell", ActivityType.SELL),
    ("staking", ActivityType.INTEREST),
]

is_ignored = casts.contains_any("type", ["deposit", "withdrawal"])


def with_timestamp(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df["timestamp"] = df["date"] + " " + df["time"]
    return df


def quote_currency(row):
    return row["quoteCurrency"] or row["feeCurrency"] or None


def pair(row):
    # Coins are listed by trading pair, e.g. BTC-EUR
    quote = quote_currency(row)
    if row["type"] in (ActivityType.BUY, ActivityType.SELL) and quote:
        return f"{row['currency']}-{quote}"
    return None


def staking_label(row):
    if row["type"] == ActivityType.INTEREST:
        return f"{row['currency']} staking"
    return None


MAPPING = SchemaMapping(
    broker=BrokerId.BITVAVO,
    columns=["timezone", "date", "time", "type", "currency", "amount", "quoteCurrency", "quotePrice",
             "receivedPaidCurrency", "receivedPaidAmount", "feeCurrency", "feeAmount", "status",
             "transactionId", "address"],
    casts={
        "timestamp": casts.date("%Y-%m-%d %H:%M:%S"),
        "type": casts.action(ACTIONS),
        "amount": casts.decimal,
        "quotePrice": casts.decimal,
        "receivedPaidAmount": casts.decimal,
        "feeAmount": casts.decimal,
    },
    is_ignored=is_ignored,
    prepare=with_timestamp,
    type="type",
    date="timestamp",
    currency=quote_currency,
    quantity="amount",
    unit_price="quotePrice",
    amount=lambda row: row["receivedPaidAmount"] if row["type"] == ActivityType.INTEREST else None,
    fee="feeAmount",
    symbol=pair,
    name=staking_label,
)
