#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import sys
import os
# Add src to path for imports (needed when running test file directly)
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

import json
import tempfile
import unittest
from datetime import datetime, timezone
from decimal import Decimal

import export_assembler
from activity import ActivityType, CanonicalActivity, DataSource


GENERATED_AT = datetime(2025, 4, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_activity(index: int = 0, **overrides) -> CanonicalActivity:
    values = dict(
        account_id="account-1",
        type=ActivityType.BUY,
        date=datetime(2025, 1, 3, tzinfo=timezone.utc),
        currency="USD",
        symbol=f"SYM{index}",
        quantity=Decimal("10"),
        unit_price=Decimal("185.2"),
        fee=Decimal("0.5"),
        comment=None,
    )
    values.update(overrides)
    return CanonicalActivity(**values)


class TestDocument(unittest.TestCase):
    """Test the export document layout"""

    def test_layout(self):
        document = export_assembler.assemble([make_activity(tags=("t1",))], generated_at=GENERATED_AT)
        data = document.to_dict()

        self.assertEqual(data["meta"], {"date": "2025-04-01T12:00:00+00:00", "version": "v0"})
        self.assertEqual(data["activities"], [{
            "accountId": "account-1",
            "comment": None,
            "fee": 0.5,
            "quantity": 10.0,
            "type": "BUY",
            "unitPrice": 185.2,
            "currency": "USD",
            "dataSource": "EXTERNAL",
            "date": "2025-01-03T00:00:00+00:00",
            "symbol": "SYM0",
            "tags": ["t1"],
        }])

    def test_json_round_trip(self):
        activities = [
            make_activity(0, comment="order 1"),
            make_activity(1, type=ActivityType.INTEREST, data_source=DataSource.MANUAL, symbol="Interest",
                          quantity=Decimal(1), unit_price=Decimal("0.42"), fee=Decimal("0.42")),
        ]
        document = export_assembler.assemble(activities, generated_at=GENERATED_AT)

        restored = export_assembler.from_json(export_assembler.to_json(document))

        self.assertEqual(restored, document)

    def test_default_timestamp(self):
        document = export_assembler.assemble([])
        self.assertIsNotNone(document.generated_at.tzinfo)
        self.assertEqual(document.activities, ())


class TestSplit(unittest.TestCase):

    def test_split_sixty(self):
        document = export_assembler.assemble([make_activity(i) for i in range(60)], generated_at=GENERATED_AT)

        chunks = export_assembler.split(document)

        self.assertEqual([len(c.activities) for c in chunks], [25, 25, 10])
        self.assertTrue(all(c.generated_at == GENERATED_AT for c in chunks))
        self.assertEqual([a.symbol for c in chunks for a in c.activities], [f"SYM{i}" for i in range(60)])

    def test_split_exact_multiple(self):
        document = export_assembler.assemble([make_activity(i) for i in range(50)], generated_at=GENERATED_AT)
        self.assertEqual([len(c.activities) for c in export_assembler.split(document)], [25, 25])

    def test_split_empty(self):
        document = export_assembler.assemble([], generated_at=GENERATED_AT)
        self.assertEqual(export_assembler.split(document), [document])

    def test_invalid_size(self):
        document = export_assembler.assemble([make_activity()], generated_at=GENERATED_AT)
        with self.assertRaises(ValueError):
            export_assembler.split(document, size=-1)


class TestOutput(unittest.TestCase):

    def test_filename(self):
        when = datetime(2025, 4, 1, 9, 8, 7)
        self.assertEqual(export_assembler.output_filename("schwab", when=when), "tracker-schwab-20250401090807.json")
        self.assertEqual(export_assembler.output_filename("degiro-v3", index=2, when=when),
                         "tracker-degiro-v3-2-20250401090807.json")

    def test_write(self):
        document = export_assembler.assemble([make_activity()], generated_at=GENERATED_AT)
        with tempfile.TemporaryDirectory() as tmp:
            path = export_assembler.write(document, os.path.join(tmp, "nested", "out.json"))
            with open(path, encoding="utf-8") as f:
                data = json.load(f)

        self.assertEqual(data["meta"]["version"], "v0")
        self.assertEqual(len(data["activities"]), 1)


if __name__ == '__main__':
    unittest.main()
