#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from activity import ActivityType
from brokers import casts
from brokers.schema_mapping import SchemaMapping
from format_detector import BrokerId


MAPPING = SchemaMapping(
    broker=BrokerId.RELAI,
    columns=["date", "transactionType", "btcAmount", "btcPrice", "currencyPair", "fiatAmountExclFees",
             "fiatCurrency", "fee", "feeCurrency", "destination", "operationId", "counterparty"],
    casts={
        "date": casts.date(),
        "transactionType": casts.action([("buy", ActivityType.BUY), ("sell", ActivityType.SELL)], exact=True),
        "btcAmount": casts.decimal,
        "btcPrice": casts.decimal,
        "fiatAmountExclFees": casts.decimal,
        "fee": casts.decimal,
    },
    type="transactionType",
    date="date",
    currency="fiatCurrency",
    quantity="btcAmount",
    unit_price="btcPrice",
    amount="fiatAmountExclFees",
    fee="fee",
    # Relai only trades bitcoin
    symbol=lambda row: f"BTC-{row['fiatCurrency']}",
)
