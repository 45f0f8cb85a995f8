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

# Deposits, withdrawals, cash interest and currency conversions have no instrument
is_ignored = casts.contains_any("action", ["deposit", "withdraw", "cash", "currency conversion"])


def dividend_total(row):
    if row["action"] == ActivityType.DIVIDEND:
        return row["total"]
    return None


def instrument_currency(row):
    # Dividends are paid out in the account currency
    if row["action"] == ActivityType.DIVIDEND and row["currencyTotal"]:
        return row["currencyTotal"]
    return row["currencyPriceShare"]


MAPPING = SchemaMapping(
    broker=BrokerId.TRADING212,
    columns=["action", "time", "isin", "ticker", "name", "noOfShares", "priceShare", "currencyPriceShare",
             "exchangeRate", "result", "currencyResult", "total", "currencyTotal", "withholdingTax",
             "currencyWithholdingTax", "notes", "id", "currencyConversionFee"],
    casts={
        "action": casts.action(ACTIONS),
        "time": casts.date(),
        "noOfShares": casts.decimal,
        "priceShare": casts.decimal,
        "total": casts.decimal,
        "currencyPriceShare": casts.currency,
        "currencyTotal": casts.currency,
    },
    is_ignored=is_ignored,
    type="action",
    date="time",
    currency=instrument_currency,
    quantity="noOfShares",
    unit_price="priceShare",
    amount=dividend_total,
    isin="isin",
    ticker="ticker",
    name="name",
)
