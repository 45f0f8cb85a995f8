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


# "Main account [RON]"
ACCOUNT_CURRENCY = re.compile(r"\[(\w+)\]")


def account_currency(row):
    match = ACCOUNT_CURRENCY.search(row["accountName"])
    return match.group(1) if match else None


MAPPING = SchemaMapping(
    broker=BrokerId.INVESTIMENTAL,
    columns=["tradesDate", "exchange", "symbol", "side", "tradesCount", "averagePrice", "totalVolume",
             "totalValue", "totalFees", "accountId", "accountName"],
    casts={
        "tradesDate": casts.date(),
        "side": casts.action([("buy", ActivityType.BUY), ("sell", ActivityType.SELL)], exact=True),
        "averagePrice": casts.decimal,
        "totalVolume": casts.decimal,
        "totalValue": casts.decimal,
        "totalFees": casts.decimal,
    },
    type="side",
    date="tradesDate",
    currency=account_currency,
    quantity="totalVolume",
    unit_price="averagePrice",
    amount="totalValue",
    fee="totalFees",
    ticker="symbol",
)
