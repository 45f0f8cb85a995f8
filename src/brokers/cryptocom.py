#!/usr/bin/env python3
"""
Crypto.com App transaction export.

Exchanges are written as "EUR -> BTC" with the sold coin in Currency and
the bought coin in To Currency. An exchange into the account's native
currency is a sale, every other exchange buys the To Currency coin.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from activity import ActivityType
from brokers import casts
from brokers.schema_mapping import SchemaMapping
from format_detector import BrokerId


ACTIONS = [
    ("->", ActivityType.BUY),
    ("reward", ActivityType.DIVIDEND),
    ("cashback", ActivityType.DIVIDEND),
]

is_ignored = casts.contains_any("transactionDescription", ["transfer", "conversion", "deposit", "withdrawal"])


def trade_type(row):
    if row["transactionDescription"] == ActivityType.BUY and row["toCurrency"] == row["nativeCurrency"]:
        return ActivityType.SELL
    return row["transactionDescription"]


def bought_coin(row) -> bool:
    return trade_type(row) == ActivityType.BUY and bool(row["toCurrency"])


def coin(row):
    return row["toCurrency"] if bought_coin(row) else row["currency"]


def quantity(row):
    return row["toAmount"] if bought_coin(row) else row["amount"]


MAPPING = SchemaMapping(
    broker=BrokerId.CRYPTOCOM,
    columns=["timestamp", "transactionDescription", "currency", "amount", "toCurrency", "toAmount",
             "nativeCurrency", "nativeAmount", "nativeAmountInUSD", "transactionKind", "transactionHash"],
    alternate_columns=[
        ["timestamp", "transactionDescription", "currency", "amount", "toCurrency", "toAmount",
         "nativeCurrency", "nativeAmount", "nativeAmountInUSD", "transactionKind"],
    ],
    casts={
        "timestamp": casts.date(tz="UTC"),
        "transactionDescription": casts.action(ACTIONS),
        "amount": casts.decimal,
        "toAmount": casts.decimal,
        "nativeAmount": casts.decimal,
        "nativeAmountInUSD": casts.decimal,
    },
    is_ignored=is_ignored,
    type=trade_type,
    date="timestamp",
    currency="nativeCurrency",
    quantity=quantity,
    amount="nativeAmount",
    symbol=lambda row: f"{coin(row)}-{row['nativeCurrency']}",
    comment="transactionKind",
)
