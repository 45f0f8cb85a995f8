#!/usr/bin/env python3
"""
Interactive Brokers flex query exports.

Trades and cash transactions come as two different reports. The cash
report books withholding tax as separate rows, which are folded into the
fee of the dividend they belong to.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging

import pandas as pd

from activity import ActivityType
from brokers import casts
from brokers.schema_mapping import SchemaMapping
from format_detector import BrokerId


logger = logging.getLogger(__name__)

ACTIONS = [
    ("buy", ActivityType.BUY),
    ("sell", ActivityType.SELL),
    ("dividend", ActivityType.DIVIDEND),
]

TRADE_COLUMNS = ["type", "date", "isin", "quantity", "price", "totalAmount", "tradeCurrency",
                 "commission", "commissionCurrency"]
CASH_COLUMNS = ["type", "date", "isin", "description", "amount", "currency"]

is_ignored = casts.is_blank("isin")


def merge_withholding_tax(df: pd.DataFrame) -> pd.DataFrame:
    """Fold withholding tax rows into the dividend paid on the same day"""
    if "description" not in df.columns:
        return df

    df = df.copy()
    df["tax"] = ""
    is_tax = df["type"].str.lower().str.contains("tax")
    dividends = df[df["type"].str.lower().str.contains("dividend") & ~is_tax]

    merged = []
    for index, tax in df[is_tax].iterrows():
        match = dividends[(dividends["isin"] == tax["isin"])
                          & (dividends["date"] == tax["date"])
                          & (dividends["currency"] == tax["currency"])]
        if match.empty:
            continue
        target = match.index[0]
        total = abs(casts.decimal(tax["amount"]) or 0) + (casts.decimal(df.at[target, "tax"]) or 0)
        df.at[target, "tax"] = str(total)
        merged.append(index)

    if merged:
        logger.debug(f"Merged {len(merged)} withholding tax rows into dividends")
    return df.drop(index=merged)


def row_currency(row):
    return row.get("currency") or row.get("tradeCurrency")


def row_fee(row):
    if "commission" in row:
        return row["commission"]
    return row.get("tax")


def dividend_comment(row):
    return row.get("description") or None


MAPPING = SchemaMapping(
    broker=BrokerId.IBKR,
    columns=TRADE_COLUMNS,
    alternate_columns=[CASH_COLUMNS],
    casts={
        "type": casts.action(ACTIONS),
        "date": casts.date(),
        "quantity": casts.decimal,
        "price": casts.decimal,
        "commission": casts.decimal,
        "amount": casts.decimal,
        "tax": casts.decimal,
        "currency": casts.currency,
        "tradeCurrency": casts.currency,
    },
    is_ignored=is_ignored,
    prepare=merge_withholding_tax,
    type="type",
    date="date",
    currency=row_currency,
    quantity="quantity",
    unit_price="price",
    amount="amount",
    fee=row_fee,
    isin="isin",
    comment=dividend_comment,
    price_precision=3,
)
