#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from activity import ActivityType
from brokers import casts
from brokers.schema_mapping import SchemaMapping
from format_detector import BrokerId


# A trade paid in one of these currencies is a buy, one paid out in them a sell
FIAT = {"EUR", "USD", "GBP", "CHF", "JPY", "CAD", "AUD", "SEK", "NOK", "DKK", "PLN"}

is_ignored = casts.contains_any("type", ["deposit", "withdrawal"])


def activity_type(row):
    if row["type"].lower() == "staking":
        return ActivityType.DIVIDEND
    if row["currencyBuy"] in FIAT and row["currencySell"] not in FIAT:
        return ActivityType.SELL
    return ActivityType.BUY


def pair(row):
    kind = activity_type(row)
    if kind == ActivityType.DIVIDEND:
        return f"{row['currencyBuy']}-{row['currencyFee']}"
    if kind == ActivityType.SELL:
        return f"{row['currencySell']}-{row['currencyBuy']}"
    return f"{row['currencyBuy']}-{row['currencySell']}"


def quantity(row):
    return row["sell"] if activity_type(row) == ActivityType.SELL else row["buy"]


def amount(row):
    if activity_type(row) in (ActivityType.SELL, ActivityType.DIVIDEND):
        return row["buy"]
    return row["sell"]


MAPPING = SchemaMapping(
    broker=BrokerId.COINTRACKING,
    columns=["type", "buy", "currencyBuy", "sell", "currencySell", "fee", "currencyFee", "exchange", "group",
             "comment", "date", "txId"],
    casts={
        "date": casts.date(),
        "buy": casts.decimal,
        "sell": casts.decimal,
        "fee": casts.decimal,
    },
    is_ignored=is_ignored,
    type=activity_type,
    date="date",
    currency=casts.constant(None),
    quantity=quantity,
    amount=amount,
    fee="fee",
    ticker=pair,
    comment="comment",
)
