#!/usr/bin/env python3
"""
DEGIRO account statements.

DEGIRO books the transaction costs of a trade and the withholding tax of a
dividend as separate rows. Both mappings fold those rows into the fee of the
activity they belong to before any row is mapped:

- DEGIRO: the cost row directly follows (or precedes) its trade or dividend
- DEGIRO_V3: rows are paired by order id, and dividend tax rows without an
  order id by ISIN and product. Duplicate rows are dropped first.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging
import re

import pandas as pd

from activity import ActivityType
from brokers import casts
from brokers.schema_mapping import SchemaMapping
from format_detector import BrokerId


logger = logging.getLogger(__name__)

COLUMNS = ["date", "time", "currencyDate", "product", "isin", "description", "fx", "currency", "amount",
           "balanceCurrency", "balance", "orderId"]

TRADE_MARKERS = ["@", "zu je"]

COST_MARKERS = [
    "en/of", "and/or", "und/oder", "e/o", "adr/gdr", "ritenuta", "belasting", "daň z dividendy",
    "taxe sur les", "impôts sur", "comissões de transação", "courtage et/ou",
]

PLATFORM_FEE_MARKERS = [
    "aansluitingskosten", "connection fee", "costi di connessione", "verbindungskosten",
    "custo de conectividade", "frais de connexion", "juros", "corporate action",
]

INTEREST_MARKERS = ["degiro courtesy"]

IGNORED_V2 = [
    "ideal", "flatex", "cash sweep", "withdrawal", "productwijziging", "währungswechsel", "trasferisci",
    "deposito", "credito", "prelievo", "creditering", "debitering", "rente", "interesse",
    "verrekening promotie",
]

IGNORED_V3 = IGNORED_V2 + [
    "credit", "operation de change", "versement de fonds", "débit", "debit", "depósito", "ingreso",
    "retirada", "levantamento de divisa", "dito de divisa", "fonds monétaires",
]

# First number in "Koop 1.000 @ 5,20 EUR" or "Buy 10 Vanguard FTSE@95.3 EUR"
SHARES = re.compile(r"(\d+(?:[.,]\d+)*)")


def _contains(text: str, markers: list[str]) -> bool:
    text = text.lower()
    return any(m in text for m in markers)


def is_trade(description: str) -> bool:
    return _contains(description, TRADE_MARKERS)


def is_cost(description: str) -> bool:
    return _contains(description, COST_MARKERS)


def ignored(markers: list[str]):
    def predicate(row) -> bool:
        description = casts.raw_value(row, "description")
        if not description:
            return True
        if not any(casts.raw_value(row, c) for c in ("date", "time", "product", "isin")):
            return True
        return _contains(description, markers)
    return predicate


def _add_fee(df: pd.DataFrame, target, source) -> None:
    cost = abs(casts.decimal_comma(df.at[source, "amount"]) or 0)
    current = casts.decimal(df.at[target, "fee"]) or 0
    df.at[target, "fee"] = str(current + cost)


def _with_timestamp(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df["timestamp"] = df["date"] + " " + df["time"]
    df["fee"] = ""
    return df


def merge_adjacent_costs(df: pd.DataFrame) -> pd.DataFrame:
    """Fold each cost row into the neighbouring row of the same product"""
    df = _with_timestamp(df)
    index = list(df.index)
    merged = set()
    for position, current in enumerate(index[:-1]):
        following = index[position + 1]
        if current in merged or following in merged:
            continue
        if (df.at[current, "isin"], df.at[current, "product"]) != (df.at[following, "isin"], df.at[following, "product"]):
            continue

        current_cost = is_cost(df.at[current, "description"])
        following_cost = is_cost(df.at[following, "description"])
        if current_cost == following_cost:
            continue

        target, source = (following, current) if current_cost else (current, following)
        _add_fee(df, target, source)
        merged.add(source)

    return df.drop(index=list(merged))


def merge_costs_by_order(df: pd.DataFrame) -> pd.DataFrame:
    """Fold cost rows into their trade (same order id) or dividend (same ISIN and product)"""
    before = len(df)
    df = _with_timestamp(df.drop_duplicates())
    if len(df) < before:
        logger.info(f"Dropped {before - len(df)} duplicate rows")

    costs = df[df["description"].map(is_cost)]
    actions = df[~df["description"].map(is_cost)]
    merged = []
    for index, cost in costs.iterrows():
        if cost["orderId"]:
            match = actions[actions["orderId"] == cost["orderId"]]
        else:
            match = actions[(actions["orderId"] == "")
                            & (actions["isin"] == cost["isin"])
                            & (actions["product"] == cost["product"])]
        if match.empty:
            continue
        _add_fee(df, match.index[0], index)
        merged.append(index)

    logger.debug(f"Merged {len(merged)} cost rows")
    return df.drop(index=merged)


def activity_type(row):
    description = row["description"]
    if _contains(description, PLATFORM_FEE_MARKERS):
        return ActivityType.FEE
    if _contains(description, INTEREST_MARKERS):
        return ActivityType.INTEREST
    if is_cost(description):
        # A cost row without its trade is booked on its own
        return ActivityType.FEE
    if is_trade(description):
        if (row["amount"] is not None and row["amount"] < 0) or "stock dividend" in description.lower():
            return ActivityType.BUY
        return ActivityType.SELL
    return ActivityType.DIVIDEND


def shares(row):
    if not is_trade(row["description"]) or is_cost(row["description"]):
        return None
    match = SHARES.search(row["description"])
    return casts.decimal_comma(match.group(1)) if match else None


def comment(row):
    if activity_type(row).needs_instrument:
        return row["orderId"] or None
    return row["description"]


def _mapping(broker: BrokerId, markers: list[str], prepare) -> SchemaMapping:
    return SchemaMapping(
        broker=broker,
        columns=COLUMNS,
        casts={
            "timestamp": casts.date("%d-%m-%Y %H:%M"),
            "amount": casts.decimal_comma,
            "fee": casts.decimal,
            "currency": casts.currency,
        },
        is_ignored=ignored(markers),
        prepare=prepare,
        type=activity_type,
        date="timestamp",
        currency="currency",
        quantity=shares,
        amount="amount",
        fee="fee",
        isin="isin",
        name="product",
        comment=comment,
        price_precision=3,
    )


MAPPING = _mapping(BrokerId.DEGIRO, IGNORED_V2, merge_adjacent_costs)

MAPPING_V3 = _mapping(BrokerId.DEGIRO_V3, IGNORED_V3, merge_costs_by_order)
