#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from decimal import Decimal

from activity import ActivityType
from brokers import casts
from brokers.schema_mapping import SchemaMapping
from format_detector import BrokerId


COLUMNS = [
    "title", "type", "timestamp", "accountCurrency", "totalAmount", "buySell", "ticker", "isin",
    "pricePerShareInAccountCurrency", "stampDuty", "quantity", "venue", "orderId", "orderType",
    "instrumentCurrency", "totalSharesAmount", "pricePerShare", "fxRate", "baseFxRate", "fXFeeBps",
    "fXFeeAmount", "dividendExDate", "dividendPayDate", "dividendEligibleQuantity",
    "dividendAmountPerShare", "dividendGrossDistributionAmount", "dividendNetDistributionAmount",
    "dividendWithheldTaxPercentage", "dividendWithheldTaxAmount",
]

NUMERIC = ["totalAmount", "pricePerShare", "stampDuty", "quantity", "fXFeeAmount",
           "dividendGrossDistributionAmount", "dividendWithheldTaxAmount"]

is_ignored = casts.contains_any("type", ["withdraw", "monthly_statement", "top_up"])

parse_date = casts.optional(casts.date())


def activity_type(row):
    kind = row["type"].lower()
    if kind == "order":
        return casts.action([("buy", ActivityType.BUY), ("sell", ActivityType.SELL)], exact=True)(row["buySell"])
    if kind == "dividend":
        return ActivityType.DIVIDEND
    if "interest_from_cash" in kind:
        return ActivityType.INTEREST
    return None


def is_dividend(row) -> bool:
    return row["type"].lower() == "dividend"


def activity_date(row):
    # Dividends are dated on the pay date
    if is_dividend(row) and row["dividendPayDate"]:
        return row["dividendPayDate"]
    return row["timestamp"]


def currency(row):
    if activity_type(row) == ActivityType.INTEREST:
        return row["accountCurrency"]
    return row["instrumentCurrency"]


def gross_amount(row):
    if is_dividend(row):
        return row["dividendGrossDistributionAmount"]
    return row["totalAmount"]


def fees(row):
    if is_dividend(row):
        return row["dividendWithheldTaxAmount"]
    return (row["stampDuty"] or Decimal(0)) + (row["fXFeeAmount"] or Decimal(0))


MAPPING = SchemaMapping(
    broker=BrokerId.FREETRADE,
    columns=COLUMNS,
    casts={
        "timestamp": casts.date(),
        "dividendPayDate": parse_date,
        "instrumentCurrency": casts.currency,
        **{column: casts.decimal for column in NUMERIC},
    },
    is_ignored=is_ignored,
    type=activity_type,
    date=activity_date,
    currency=currency,
    quantity="quantity",
    unit_price="pricePerShare",
    amount=gross_amount,
    fee=fees,
    isin="isin",
    ticker="ticker",
    name=lambda row: row["title"] if activity_type(row) == ActivityType.INTEREST else None,
    comment="title",
)
