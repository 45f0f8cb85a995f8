#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import re

import pandas as pd

import constants as const
from activity import ActivityType
from brokers import casts
from brokers.schema_mapping import SchemaMapping
from format_detector import BrokerId


ACTIONS = [
    ("stocks/etf purchase", ActivityType.BUY),
    ("ações/etf compra", ActivityType.BUY),
    ("stocks/etf sale", ActivityType.SELL),
    ("ações/etf vende", ActivityType.SELL),
    ("free funds interests", ActivityType.INTEREST),
    ("sec fee", ActivityType.FEE),
    ("swap", ActivityType.FEE),
    ("commission", ActivityType.FEE),
    ("dividend", ActivityType.DIVIDEND),
]

# "OPEN BUY 2/3 @ 145.20" or "CLOSE BUY 1.5 @ 150.00"
TRADE_COMMENT = re.compile(r"(?:OPEN|CLOSE) BUY ([0-9]+(?:\.[0-9]+)?)(?:/[0-9]+(?:\.[0-9]+)?)? @ ([0-9]+(?:\.[0-9]+)?)")

is_ignored = casts.contains_any("type", ["deposit", "withdrawal", "tax", "transfer"])

normalize_action = casts.action(ACTIONS)


def activity_type(row):
    action = normalize_action(row["type"])
    if action is None and "profit/loss" in row["type"].lower():
        return ActivityType.FEE if (row["amount"] or 0) < 0 else ActivityType.INTEREST
    return action


def instrument_symbol(row):
    # XTB lists London shares as .UK, the lookup service knows them as .L
    symbol = row["symbol"]
    if symbol.upper().endswith(".UK"):
        return symbol[:-3] + ".L"
    return symbol or None


def trade_detail(group: int):
    def field(row):
        match = TRADE_COMMENT.search(row["comment"])
        return casts.decimal(match.group(group)) if match else None
    return field


def account_currency(row):
    # Instrument rows take the currency of the resolved security
    if activity_type(row) in (ActivityType.INTEREST, ActivityType.FEE):
        return const.XTB_ACCOUNT_CURRENCY
    return None


def withholding_tax(row):
    return casts.decimal(row["tax"]) if row.get("tax") else None


def merge_dividend_tax(df: pd.DataFrame) -> pd.DataFrame:
    """Attach each withholding tax row to the dividend with the same symbol and time"""
    df = df.copy()
    df["tax"] = ""
    taxes = df[df["type"].str.lower().str.contains("tax")]
    for index, dividend in df[df["type"].str.lower().str.contains("dividend")].iterrows():
        match = taxes[(taxes["symbol"] == dividend["symbol"]) & (taxes["time"] == dividend["time"])]
        if not match.empty:
            df.at[index, "tax"] = match.iloc[0]["amount"]
    return df


MAPPING = SchemaMapping(
    broker=BrokerId.XTB,
    delimiter=";",
    columns=["id", "type", "time", "symbol", "comment", "amount"],
    casts={
        "time": casts.date("%d.%m.%Y %H:%M:%S"),
        "amount": casts.decimal,
    },
    is_ignored=is_ignored,
    prepare=merge_dividend_tax,
    type=activity_type,
    date="time",
    currency=account_currency,
    quantity=trade_detail(1),
    unit_price=trade_detail(2),
    amount="amount",
    fee=withholding_tax,
    ticker=instrument_symbol,
    comment="comment",
)
