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
]

# Crypto positions are tracked in a separate portfolio
is_ignored = casts.any_of(
    casts.contains_any("way", ["deposit", "withdraw", "transfer"]),
    lambda row: casts.raw_value(row, "baseType").upper() == "CRYPTO",
)


MAPPING = SchemaMapping(
    broker=BrokerId.DELTA,
    columns=["date", "way", "baseAmount", "baseCurrencyName", "baseType", "quoteAmount", "quoteCurrency",
             "exchange", "sentReceivedFrom", "sentTo", "feeAmount", "feeCurrencyName", "broker", "notes"],
    casts={
        "date": casts.date(),
        "way": casts.action(ACTIONS),
        "baseAmount": casts.decimal,
        "quoteAmount": casts.decimal,
        "feeAmount": casts.decimal,
        "quoteCurrency": casts.currency,
    },
    is_ignored=is_ignored,
    type="way",
    date="date",
    currency="quoteCurrency",
    quantity="baseAmount",
    amount="quoteAmount",
    fee="feeAmount",
    ticker="baseCurrencyName",
    comment="notes",
    price_precision=2,
)
