#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging
from decimal import Decimal

import util
from activity import ActivityType, CanonicalActivity, DataSource, InstrumentQuery, SecurityReference
from brokers.schema_mapping import BrokerRecord, RawRow, SchemaMapping
from instrument_resolver import InstrumentResolver


# Module-level logger
logger = logging.getLogger(__name__)


class ActivityMapper:
    """
    Turns the parsed rows of one export into canonical activities.

    Each row goes through the same steps:
    1. Ignored rows (deposits, transfers, totals) are skipped
    2. Interest, fee and refund rows become manual activities
    3. Other rows are resolved to a security; unresolved rows are logged
       for manual entry and skipped
    4. Quantity and unit price are normalized to absolute values

    Rows are handled strictly in order and each lookup is awaited before the
    next row starts. A RemoteError from the resolver aborts the whole run.
    """

    def __init__(self, resolver: InstrumentResolver, account_id: str, tags: list[str] | None = None):
        self.resolver = resolver
        self.account_id = account_id
        self.tags = tuple(tags) if tags else None
        self.stats = {"rows": 0, "ignored": 0, "unsupported": 0, "unresolved": 0, "activities": 0}

    async def map_rows(self, mapping: SchemaMapping, rows: list[RawRow]) -> list[CanonicalActivity]:
        activities: list[CanonicalActivity] = []
        for row in rows:
            activity = await self.map_row(mapping, row)
            if activity is not None:
                activities.append(activity)

        logger.info(f"Mapped {self.stats['activities']} activities from {self.stats['rows']} rows "
                    f"({self.stats['ignored']} ignored, {self.stats['unresolved']} need manual entry)")
        return activities

    async def map_row(self, mapping: SchemaMapping, row: RawRow) -> CanonicalActivity | None:
        self.stats["rows"] += 1

        if mapping.is_ignored(row):
            logger.debug(f"Line {row.line}: ignored")
            self.stats["ignored"] += 1
            return None

        record = mapping.extract(mapping.cast(row))
        if record.type is None:
            logger.warning(f"Line {row.line}: unsupported transaction type, skipping")
            self.stats["unsupported"] += 1
            return None

        if not record.type.needs_instrument:
            activity = self.manual_activity(record)
        else:
            security = await self.find_security(record, row.line)
            if security is None:
                self.stats["unresolved"] += 1
                return None
            activity = self.security_activity(record, security, mapping.price_precision, row.line)

        if activity is not None:
            self.stats["activities"] += 1
        return activity

    async def find_security(self, record: BrokerRecord, line: int) -> SecurityReference | None:
        # Crypto exports name the traded pair themselves
        if record.symbol:
            return SecurityReference(symbol=record.symbol, currency=record.currency or "")

        if not (record.isin or record.ticker or record.name):
            logger.warning(f"Line {line}: no ISIN, ticker or name to look up, manual entry required")
            return None

        query = InstrumentQuery(isin=record.isin, ticker=record.ticker, name=record.name,
                                expected_currency=record.currency)
        security = await self.resolver.resolve(query)
        if security is None:
            logger.warning(f"Line {line}: no security found for {query.describe()} "
                           f"with currency {record.currency}, manual entry required")
        return security

    def manual_activity(self, record: BrokerRecord) -> CanonicalActivity:
        amount = abs(record.amount or Decimal(0))
        return CanonicalActivity(
            account_id=self.account_id,
            type=record.type,
            date=record.date,
            currency=record.currency or "",
            symbol=record.name or record.comment or "",
            quantity=Decimal(1),
            unit_price=amount,
            fee=amount,
            data_source=DataSource.MANUAL,
            comment=record.comment,
            tags=self.tags,
        )

    def security_activity(self, record: BrokerRecord, security: SecurityReference,
                          precision: int, line: int) -> CanonicalActivity | None:
        fee = abs(record.fee or Decimal(0))

        if record.type == ActivityType.DIVIDEND:
            quantity = Decimal(1)
            gross = record.amount if record.amount is not None else record.unit_price
            unit_price = abs(gross or Decimal(0))
        else:
            quantity = abs(record.quantity or Decimal(0))
            if record.unit_price is not None:
                unit_price = abs(record.unit_price)
            elif quantity and record.amount is not None:
                unit_price = util.round_decimal(abs(record.amount) / quantity, precision)
            else:
                logger.warning(f"Line {line}: no quantity or price for {security.symbol}, skipping")
                self.stats["unsupported"] += 1
                return None

        return CanonicalActivity(
            account_id=self.account_id,
            type=record.type,
            date=record.date,
            currency=record.currency or security.currency,
            symbol=security.symbol,
            quantity=quantity,
            unit_price=unit_price,
            fee=fee,
            data_source=security.data_source,
            comment=record.comment,
            tags=self.tags,
        )
