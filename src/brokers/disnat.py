#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from activity import ActivityType
from brokers import casts
from brokers.schema_mapping import SchemaMapping
from format_detector import BrokerId


# French and English labels, checked in order
ACTIONS = [
    ("achat", ActivityType.BUY),
    ("buy", ActivityType.BUY),
    ("vente", ActivityType.SELL),
    ("sell", ActivityType.SELL),
    ("dividend", ActivityType.DIVIDEND),
    ("intérêts", ActivityType.INTEREST),
    ("interet", ActivityType.INTEREST),
    ("interest", ActivityType.INTEREST),
    ("frais", ActivityType.FEE),
    ("taxe", ActivityType.FEE),
    ("fee", ActivityType.FEE),
    ("tax", ActivityType.FEE),
]

# Contributions, transfers and withdrawals move cash between accounts
is_ignored = casts.contains_any("typeDeTransaction", [
    "cotisation", "contribution", "transfert", "transfer", "subvention", "résiliation", "retrait",
])


def number(value: str):
    # Either decimal separator, "1,5" and "1.5" are the same amount
    return casts.decimal(value.replace('"', "").replace(",", "."))


def text_or_none(column: str):
    def value(row):
        text = row[column].strip()
        return None if text in ("", "-") else text
    return value


def currency(row):
    # Prices of Canadian listings are marked CAN
    price_currency = row["deviseDuPrix"].strip()
    if price_currency == "CAN":
        return "CAD"
    return casts.currency(price_currency) if price_currency not in ("", "-") else row["deviseDuCompte"].strip()


MAPPING = SchemaMapping(
    broker=BrokerId.DISNAT,
    columns=["dateDeTransaction", "dateDeReglement", "typeDeTransaction", "classeDActif", "symbole",
             "description", "marche", "quantite", "prix", "deviseDuPrix", "commissionPayee",
             "montantDeLOperation", "deviseDuCompte"],
    casts={
        "dateDeReglement": casts.date("%Y-%m-%d"),
        "typeDeTransaction": casts.action(ACTIONS),
        "quantite": number,
        "prix": number,
        "commissionPayee": number,
        "montantDeLOperation": number,
    },
    is_ignored=is_ignored,
    type="typeDeTransaction",
    date="dateDeReglement",
    currency=currency,
    quantity="quantite",
    unit_price="prix",
    amount="montantDeLOperation",
    fee="commissionPayee",
    ticker=text_or_none("symbole"),
    name=text_or_none("description"),
    comment=text_or_none("description"),
)
