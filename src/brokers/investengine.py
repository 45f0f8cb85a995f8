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
]


def security_part(index: int):
    # "Vanguard FTSE All-World UCITS ETF / ISIN IE00BK5BQT80"
    def field(row):
        parts = row["security"].split(" / ISIN ")
        return parts[index].strip() if len(parts) > index and parts[index].strip() else None
    return field


MAPPING = SchemaMapping(
    broker=BrokerId.INVESTENGINE,
    columns=["security", "transactionType", "quantity", "sharePrice", "totalTradeValue", "tradeDateTime",
             "settlementDate", "broker"],
    casts={
        "transactionType": casts.action(ACTIONS, exact=True),
        "quantity": casts.decimal,
        "sharePrice": casts.decimal,
        "totalTradeValue": casts.decimal,
        "tradeDateTime": casts.date("%d/%m/%y %H:%M:%S"),
    },
    type="transactionType",
    date="tradeDateTime",
    currency=casts.constant("GBP"),
    quantity="quantity",
    unit_price="sharePrice",
    amount="totalTradeValue",
    isin=security_part(1),
    name=security_part(0),
)
