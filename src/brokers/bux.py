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
    ("interest", ActivityType.INTEREST),
    ("fee", ActivityType.FEE),
]

is_ignored = casts.contains_any("transactionType", ["deposit", "withdrawal"])


MAPPING = SchemaMapping(
    broker=BrokerId.BUX,
    columns=["transactionTime", "transactionCategory", "transactionType", "assetId", "assetName",
             "assetCurrency", "transactionCurrency", "currencyPair", "exchangeRate", "transactionAmount",
             "tradeAmount", "tradePrice", "tradeQuantity", "cashBalanceAmount", "profitAndLossAmount",
             "profitAndLossCurrency"],
    casts={
        "transactionTime": casts.date(),
        "transactionType": casts.action(ACTIONS),
        "transactionAmount": casts.decimal,
        "tradePrice": casts.decimal,
        "tradeQuantity": casts.decimal,
        "assetCurrency": casts.currency,
        "transactionCurrency": casts.currency,
    },
    is_ignored=is_ignored,
    type="transactionType",
    date="transactionTime",
    currency=lambda row: row["assetCurrency"] or row["transactionCurrency"],
    quantity="tradeQuantity",
    unit_price="tradePrice",
    amount="transactionAmount",
    isin="assetId",
    name="assetName",
)
