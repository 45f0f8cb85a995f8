#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import csv
import io
import logging
from collections import namedtuple
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from brokers.casts import never
from exceptions import ParseError
from format_detector import BrokerId


# Module-level logger
logger = logging.getLogger(__name__)

# A canonical field is read from a column (str) or computed from the row (callable)
Field = str | Callable[["RawRow"], Any] | None

BrokerRecord = namedtuple("BrokerRecord", [
    "type", "date", "currency", "quantity", "unit_price", "amount", "fee",
    "isin", "ticker", "name", "symbol", "comment",
])

CANONICAL_FIELDS = BrokerRecord._fields


class RawRow(dict):
    """Cast values of one CSV line, keyed by column name"""

    def __init__(self, values: dict[str, Any], line: int, raw: dict[str, str] | None = None):
        super().__init__(values)
        self.line = line
        self.raw = raw if raw is not None else dict(values)


@dataclass(frozen=True)
class SchemaMapping:
    """
    Data description of one broker export.

    The mapping names the CSV layout (delimiter and columns), how each column
    is cast, which rows are administrative noise, and where each canonical
    activity field comes from. Rows are turned into activities by the shared
    ActivityMapper, so a broker is a value of this class and never a subclass.
    """
    broker: BrokerId
    columns: list[str]
    type: Field
    date: Field
    currency: Field
    delimiter: str = ","
    header_prefix: str | None = None
    alternate_columns: list[list[str]] = field(default_factory=list)
    casts: dict[str, Callable[[str], Any]] = field(default_factory=dict)
    is_ignored: Callable[[RawRow], bool] = never
    prepare: Callable[[pd.DataFrame], pd.DataFrame] | None = None
    quantity: Field = None
    unit_price: Field = None
    amount: Field = None
    fee: Field = None
    isin: Field = None
    ticker: Field = None
    name: Field = None
    symbol: Field = None
    comment: Field = None
    price_precision: int = 6

    def columns_for(self, header: list[str]) -> list[str]:
        """Pick the column set matching the header's field count"""
        for columns in [self.columns, *self.alternate_columns]:
            if len(columns) == len(header):
                return columns

        expected = sorted({len(c) for c in [self.columns, *self.alternate_columns]})
        logger.error(f"Header of {self.broker.value} export has {len(header)} columns, expected {expected}")
        raise ParseError(f"header has {len(header)} columns, expected {' or '.join(map(str, expected))}", line=1)

    def split(self, text: str) -> tuple[list[str], list[tuple[int, list[str]]]]:
        """
        Split CSV text into the header and numbered data rows.

        Returns:
            Tuple of (header fields, [(line_number, fields), ...])

        Raises:
            ParseError: If a data row does not have as many fields as the header
        """
        reader = csv.reader(io.StringIO(text.lstrip("\ufeff")), delimiter=self.delimiter)

        header: list[str] | None = None
        rows: list[tuple[int, list[str]]] = []
        try:
            for fields in reader:
                if not fields or all(not f.strip() for f in fields):
                    continue
                if header is None:
                    # Some exports open with a preamble above the real header
                    if self.header_prefix and not fields[0].strip().startswith(self.header_prefix):
                        continue
                    header = fields
                    continue
                if len(fields) != len(header):
                    logger.error(f"Line {reader.line_num}: expected {len(header)} fields, found {len(fields)}")
                    raise ParseError(f"expected {len(header)} fields, found {len(fields)}", line=reader.line_num)
                rows.append((reader.line_num, fields))
        except csv.Error as e:
            raise ParseError(f"malformed CSV: {e}", line=reader.line_num)

        if header is None:
            raise ParseError("file is empty")

        return header, rows

    def read(self, text: str) -> pd.DataFrame:
        """
        Load CSV text into a DataFrame of strings indexed by line number.

        The optional prepare step runs on the whole frame, for brokers that
        spread one activity over several rows.
        """
        header, rows = self.split(text)
        columns = self.columns_for(header)
        if not rows:
            logger.error(f"No rows found in {self.broker.value} export")
            raise ParseError("no rows found in file")

        df = pd.DataFrame([fields for _, fields in rows], columns=columns,
                          index=[line for line, _ in rows], dtype=str)
        logger.debug(f"Loaded {len(df)} rows with {len(df.columns)} columns")

        # Trim whitespace
        df = df.apply(lambda col: col.str.strip())

        if self.prepare is not None and not df.empty:
            df = self.prepare(df)
            df = df.fillna("")

        if df.empty:
            logger.error(f"No rows found in {self.broker.value} export")
            raise ParseError("no rows found in file")

        return df

    def cast(self, row: RawRow) -> RawRow:
        """Apply the column casts to a row of text, keeping the text as row.raw"""
        typed: dict[str, Any] = dict(row.raw)
        for column, cast in self.casts.items():
            if column not in typed:
                continue
            try:
                typed[column] = cast(row.raw[column])
            except (ValueError, TypeError) as e:
                logger.error(f"Line {row.line}: cannot cast {column}={row.raw[column]!r}: {e}")
                raise ParseError(f"invalid value {row.raw[column]!r} in column '{column}': {e}", line=row.line)
        return RawRow(typed, row.line, raw=row.raw)

    def parse(self, text: str) -> list[RawRow]:
        """
        Parse a complete export into rows of text, one per data line.

        Rows are cast separately (see cast) so administrative rows can be
        ignored before their values are interpreted.

        Raises:
            ParseError: On a malformed file, a field-count mismatch or zero rows
        """
        logger.info(f"Parsing {self.broker.value} export")
        df = self.read(text)
        rows = [RawRow({k: str(v) for k, v in values.items()}, int(line)) for line, values in df.iterrows()]
        logger.info(f"Parsed {len(rows)} rows")
        return rows

    def value(self, source: Field, row: RawRow) -> Any:
        if source is None:
            return None
        if isinstance(source, str):
            value = row.get(source)
            return None if value == "" else value
        return source(row)

    def extract(self, row: RawRow) -> BrokerRecord:
        """Read every canonical field of one row"""
        return BrokerRecord(**{name: self.value(getattr(self, name), row) for name in CANONICAL_FIELDS})
