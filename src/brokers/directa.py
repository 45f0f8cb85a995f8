#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import util
from activity import ActivityType
from brokers import casts
from brokers.schema_mapping import SchemaMapping
from format_detector import BrokerId


ACTIONS = [
    ("acquisto", ActivityType.BUY),
    ("vendita", ActivityType.SELL),
    ("provento", ActivityType.DIVIDEND),
    ("dividendi", ActivityType.DIVIDEND),
    ("coupon", ActivityType.DIVIDEND),
    ("commissioni", ActivityType.FEE),
    ("rit.", ActivityType.FEE),
    ("ritenuta", ActivityType.FEE),
    ("ratei", ActivityType.FEE),
    ("tobin tax", ActivityType.FEE),
    ("cedola", ActivityType.INTEREST),
]

# Bonds are quoted per 100 of nominal value
BOND_MARKERS = ["cdp obb", "romania", "btp"]

is_ignored = casts.any_of(
    casts.is_blank("dataValuta"),
    casts.contains_any("tipoOperazione", ["conferimento", "bonifico", "finanziamento", "bollo", "prelievo"]),
)


def is_bond(row) -> bool:
    description = row["descrizione"].lower()
    return any(m in description for m in BOND_MARKERS)


def quantity(row):
    if row["quantita"] is None:
        return None
    if is_bond(row):
        return row["quantita"] / 100
    return row["quantita"]


def unit_price(row):
    if not row["quantita"] or row["importoEuro"] is None:
        return None
    price = abs(row["importoEuro"]) / abs(row["quantita"])
    if is_bond(row):
        price *= 100
    return util.round_decimal(price, 6)


def currency(row):
    if row["tipoOperazione"] in (ActivityType.FEE, ActivityType.INTEREST):
        return row["divisa"] or "EUR"
    return row["divisa"] or None


MAPPING = SchemaMapping(
    broker=BrokerId.DIRECTA,
    header_prefix="Data operazione",
    columns=["dataOperazione", "dataValuta", "tipoOperazione", "ticker", "isin", "protocollo", "descrizione",
             "quantita", "importoEuro", "importoDivisa", "divisa", "riferimentoOrdine"],
    casts={
        "dataValuta": casts.date("%d-%m-%Y"),
        "tipoOperazione": casts.action(ACTIONS),
        "quantita": casts.decimal,
        "importoEuro": casts.decimal,
        "importoDivisa": casts.decimal,
        "divisa": casts.currency,
    },
    is_ignored=is_ignored,
    type="tipoOperazione",
    date="dataValuta",
    currency=currency,
    quantity=quantity,
    unit_price=unit_price,
    amount="importoEuro",
    isin="isin",
    ticker="ticker",
    name="descrizione",
    comment="descrizione",
)
