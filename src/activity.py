#!/usr/bin/env python3
"""
Canonical activity model

Types shared by the broker mappings, the instrument resolver and the export:
the instrument query sent to the lookup service, the security it resolves to
and the normalized activity written to the export document.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class ActivityType(Enum):
    """Activity types understood by the portfolio tracker"""
    BUY = "BUY"
    SELL = "SELL"
    DIVIDEND = "DIVIDEND"
    INTEREST = "INTEREST"
    FEE = "FEE"
    REFUND = "REFUND"

    @property
    def needs_instrument(self) -> bool:
        return self not in (ActivityType.INTEREST, ActivityType.FEE, ActivityType.REFUND)


class DataSource(Enum):
    EXTERNAL = "EXTERNAL"
    MANUAL = "MANUAL"


@dataclass(frozen=True)
class InstrumentQuery:
    """Weak identifier tuple for one security, as found in a broker row"""
    isin: str | None = None
    ticker: str | None = None
    name: str | None = None
    expected_currency: str | None = None

    def __post_init__(self):
        if not (self.isin or self.ticker or self.name):
            raise ValueError("InstrumentQuery needs at least one of isin, ticker or name")

    def describe(self) -> str:
        return self.isin or self.ticker or self.name or ""


@dataclass(frozen=True)
class SecurityReference:
    symbol: str
    currency: str
    data_source: DataSource = DataSource.EXTERNAL
    name: str | None = None


@dataclass(frozen=True)
class CanonicalActivity:
    """
    One normalized transaction.

    quantity and unit_price are never negative; the direction of the
    transaction is carried by `type` alone.
    """
    account_id: str
    type: ActivityType
    date: datetime
    currency: str
    symbol: str
    quantity: Decimal
    unit_price: Decimal
    fee: Decimal = Decimal(0)
    data_source: DataSource = DataSource.EXTERNAL
    comment: str | None = None
    tags: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "accountId": self.account_id,
            "comment": self.comment,
            "fee": float(self.fee),
            "quantity": float(self.quantity),
            "type": self.type.value,
            "unitPrice": float(self.unit_price),
            "currency": self.currency,
            "dataSource": self.data_source.value,
            "date": self.date.isoformat(),
            "symbol": self.symbol,
        }
        if self.tags:
            result["tags"] = list(self.tags)
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CanonicalActivity":
        tags = data.get("tags")
        return cls(
            account_id=data["accountId"],
            comment=data.get("comment"),
            fee=Decimal(str(data["fee"])),
            quantity=Decimal(str(data["quantity"])),
            type=ActivityType(data["type"]),
            unit_price=Decimal(str(data["unitPrice"])),
            currency=data["currency"],
            data_source=DataSource(data["dataSource"]),
            date=datetime.fromisoformat(data["date"]),
            symbol=data["symbol"],
            tags=tuple(tags) if tags else None,
        )
