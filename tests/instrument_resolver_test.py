#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import sys
import os
# Add src to path for imports (needed when running test file directly)
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

import tempfile
import unittest

from activity import InstrumentQuery
from exceptions import RemoteError
from instrument_resolver import InstrumentResolver, ResolutionCache, load_overrides, normalize_currency
from tests.test_data_factory import FailingLookupProvider, FakeLookupProvider, TestDataFactory


VWRL_ISIN = "IE00B3RBWM25"
APPLE_ISIN = "US0378331005"


def resolver_for(provider, overrides=None, preferred_postfix=None) -> InstrumentResolver:
    return InstrumentResolver(provider, ResolutionCache(), overrides=overrides, preferred_postfix=preferred_postfix)


class TestResolutionCache(unittest.TestCase):

    def test_hits_and_misses(self):
        cache = ResolutionCache()
        self.assertIsNone(cache.get(VWRL_ISIN))
        cache.put(VWRL_ISIN, TestDataFactory.security("VWRL.AS", "EUR"))
        self.assertEqual(cache.get(VWRL_ISIN).symbol, "VWRL.AS")
        self.assertIn(VWRL_ISIN, cache)
        self.assertEqual(len(cache), 1)

        stats = cache.get_cache_stats()
        self.assertEqual(stats["cache_hits"], 1)
        self.assertEqual(stats["cache_misses"], 1)
        self.assertEqual(stats["entries"], 1)


class TestInstrumentResolver(unittest.IsolatedAsyncioTestCase):
    """Test the cascading lookup and the run cache"""

    async def test_same_isin_queried_once(self):
        provider = FakeLookupProvider({VWRL_ISIN: [TestDataFactory.security("VWRL.AS", "EUR")]})
        resolver = resolver_for(provider)
        query = InstrumentQuery(isin=VWRL_ISIN, expected_currency="EUR")

        first = await resolver.resolve(query)
        second = await resolver.resolve(query)

        self.assertEqual(first, second)
        self.assertEqual(first.symbol, "VWRL.AS")
        self.assertEqual(provider.queries, [VWRL_ISIN])
        self.assertEqual(resolver.cache.get_cache_stats()["remote_queries"], 1)

    async def test_unresolved_isin_queried_again(self):
        """Misses are not cached"""
        provider = FakeLookupProvider()
        resolver = resolver_for(provider)
        query = InstrumentQuery(isin=VWRL_ISIN, expected_currency="EUR")

        self.assertIsNone(await resolver.resolve(query))
        self.assertIsNone(await resolver.resolve(query))

        self.assertEqual(provider.queries, [VWRL_ISIN, VWRL_ISIN])
        self.assertNotIn(VWRL_ISIN, resolver.cache)

    async def test_cascade_isin_ticker_stripped_ticker(self):
        provider = FakeLookupProvider({"VWRL": [TestDataFactory.security("VWRL.AS", "EUR")]})
        resolver = resolver_for(provider)

        security = await resolver.resolve(InstrumentQuery(isin=VWRL_ISIN, ticker="VWRL.XX", expected_currency="EUR"))

        self.assertEqual(security.symbol, "VWRL.AS")
        self.assertEqual(provider.queries, [VWRL_ISIN, "VWRL.XX", "VWRL"])
        self.assertIn(VWRL_ISIN, resolver.cache)

    async def test_listing_symbol_from_isin_candidates(self):
        """An ISIN quoted only in another currency is retried by its listing symbol"""
        provider = FakeLookupProvider({
            APPLE_ISIN: [TestDataFactory.security("AAPL", "USD")],
            "AAPL": [TestDataFactory.security("AAPL", "USD"), TestDataFactory.security("APC.DE", "EUR")],
        })
        resolver = resolver_for(provider)

        security = await resolver.resolve(InstrumentQuery(isin=APPLE_ISIN, name="APPLE INC", expected_currency="EUR"))

        self.assertEqual(security.symbol, "APC.DE")
        self.assertEqual(provider.queries, [APPLE_ISIN, "AAPL"])
        self.assertIn(APPLE_ISIN, resolver.cache)

    async def test_listing_symbol_drops_exchange_suffix(self):
        provider = FakeLookupProvider({
            VWRL_ISIN: [TestDataFactory.security("VWRL.L", "GBP")],
            "VWRL": [TestDataFactory.security("VWRL.AS", "EUR")],
        })
        resolver = resolver_for(provider)

        security = await resolver.resolve(InstrumentQuery(isin=VWRL_ISIN, expected_currency="EUR"))

        self.assertEqual(security.symbol, "VWRL.AS")
        self.assertEqual(provider.queries, [VWRL_ISIN, "VWRL"])

    async def test_name_taken_from_isin_candidates(self):
        name = "Vanguard FTSE All-World UCITS ETF"
        provider = FakeLookupProvider({
            VWRL_ISIN: [TestDataFactory.security("VWRL.L", "GBP", name=name)],
            name: [TestDataFactory.security("VWRL.SW", "CHF")],
        })
        resolver = resolver_for(provider)

        security = await resolver.resolve(InstrumentQuery(isin=VWRL_ISIN, expected_currency="CHF"))

        self.assertEqual(security.symbol, "VWRL.SW")
        self.assertEqual(provider.queries, [VWRL_ISIN, "VWRL", name])

    async def test_given_ticker_not_replaced(self):
        provider = FakeLookupProvider({APPLE_ISIN: [TestDataFactory.security("AAPL", "USD")]})
        resolver = resolver_for(provider)

        self.assertIsNone(await resolver.resolve(InstrumentQuery(isin=APPLE_ISIN, ticker="APC", expected_currency="EUR")))
        self.assertEqual(provider.queries, [APPLE_ISIN, "APC"])

    async def test_name_used_last(self):
        provider = FakeLookupProvider({"APPLE INC": [TestDataFactory.security("AAPL")]})
        resolver = resolver_for(provider)

        security = await resolver.resolve(InstrumentQuery(ticker="AAPL1", name="APPLE INC", expected_currency="USD"))

        self.assertEqual(security.symbol, "AAPL")
        self.assertEqual(provider.queries, ["AAPL1", "APPLE INC"])

    async def test_partial_name_retry(self):
        name = "Vanguard FTSE All-World UCITS ETF"
        provider = FakeLookupProvider({name[:20]: [TestDataFactory.security("VWRL.AS", "EUR")]})
        resolver = resolver_for(provider)

        security = await resolver.resolve(InstrumentQuery(name=name, expected_currency="EUR"))

        self.assertEqual(security.symbol, "VWRL.AS")
        self.assertEqual(provider.queries, [name, "Vanguard FTSE All-Wo"])

    async def test_short_text_not_retried(self):
        provider = FakeLookupProvider()
        resolver = resolver_for(provider)

        await resolver.resolve(InstrumentQuery(ticker="AAPL", expected_currency="USD"))

        self.assertEqual(provider.queries, ["AAPL"])

    async def test_currency_mismatch_is_unresolved(self):
        provider = FakeLookupProvider({"AAPL": [TestDataFactory.security("AAPL", "USD")]})
        resolver = resolver_for(provider)

        self.assertIsNone(await resolver.resolve(InstrumentQuery(ticker="AAPL", expected_currency="EUR")))

    async def test_no_expected_currency_takes_first(self):
        provider = FakeLookupProvider({"BTC": [TestDataFactory.security("BTCUSD", "USD"),
                                               TestDataFactory.security("BTCEUR", "EUR")]})
        resolver = resolver_for(provider)

        security = await resolver.resolve(InstrumentQuery(ticker="BTC"))

        self.assertEqual(security.symbol, "BTCUSD")

    async def test_pence_quotes(self):
        provider = FakeLookupProvider({"VUSA": [TestDataFactory.security("VUSA.L", "GBp")]})
        resolver = resolver_for(provider)

        gbx = await resolver.resolve(InstrumentQuery(ticker="VUSA", expected_currency="GBX"))
        gbp = await resolver.resolve(InstrumentQuery(ticker="VUSA", expected_currency="GBP"))

        self.assertEqual(gbx.symbol, "VUSA.L")
        self.assertEqual(gbp.symbol, "VUSA.L")

    async def test_pound_quote_preferred_over_pence(self):
        provider = FakeLookupProvider({"VUSA": [TestDataFactory.security("VUSA.L", "GBp"),
                                                TestDataFactory.security("VUSD.L", "GBP")]})
        resolver = resolver_for(provider)

        security = await resolver.resolve(InstrumentQuery(ticker="VUSA", expected_currency="GBP"))

        self.assertEqual(security.symbol, "VUSD.L")

    async def test_override_replaces_isin_query(self):
        provider = FakeLookupProvider({"VWRL.AS": [TestDataFactory.security("VWRL.AS", "EUR")]})
        resolver = resolver_for(provider, overrides={VWRL_ISIN: "VWRL.AS"})

        security = await resolver.resolve(InstrumentQuery(isin=VWRL_ISIN, ticker="VWRL", expected_currency="EUR"))

        self.assertEqual(security.symbol, "VWRL.AS")
        self.assertEqual(provider.queries, ["VWRL.AS"])

    async def test_preferred_postfix(self):
        provider = FakeLookupProvider({VWRL_ISIN: [TestDataFactory.security("VWRL.SW", "EUR"),
                                                   TestDataFactory.security("VWRL.AS", "EUR")]})
        preferred = resolver_for(provider, preferred_postfix=".AS")
        default = resolver_for(provider)

        query = InstrumentQuery(isin=VWRL_ISIN, expected_currency="EUR")
        self.assertEqual((await preferred.resolve(query)).symbol, "VWRL.AS")
        self.assertEqual((await default.resolve(query)).symbol, "VWRL.SW")

    async def test_preferred_postfix_matches_symbol_end(self):
        provider = FakeLookupProvider({VWRL_ISIN: [TestDataFactory.security("VWRL.SW", "EUR"),
                                                   TestDataFactory.security("VWRL.ASX", "EUR")]})
        resolver = resolver_for(provider, preferred_postfix=".AS")

        security = await resolver.resolve(InstrumentQuery(isin=VWRL_ISIN, expected_currency="EUR"))

        self.assertEqual(security.symbol, "VWRL.SW")

    async def test_remote_error_propagates(self):
        resolver = resolver_for(FailingLookupProvider())
        with self.assertRaises(RemoteError):
            await resolver.resolve(InstrumentQuery(isin=VWRL_ISIN, expected_currency="EUR"))


class TestOverrides(unittest.TestCase):

    def test_load_overrides(self):
        with tempfile.NamedTemporaryFile("w", suffix=".txt", delete=False, encoding="utf-8") as f:
            f.write("# ISIN overrides\n\nIE00B3RBWM25 = VWRL.AS\nnot an override\nUS0378331005=AAPL\n")
            path = f.name
        try:
            overrides = load_overrides(path)
        finally:
            os.remove(path)

        self.assertEqual(overrides, {"IE00B3RBWM25": "VWRL.AS", "US0378331005": "AAPL"})

    def test_missing_file(self):
        self.assertEqual(load_overrides("/nonexistent/overrides.txt"), {})


class TestQuery(unittest.TestCase):

    def test_query_needs_an_identifier(self):
        with self.assertRaises(ValueError):
            InstrumentQuery(expected_currency="USD")

    def test_normalize_currency(self):
        self.assertEqual(normalize_currency("GBX"), "GBp")
        self.assertEqual(normalize_currency("USD"), "USD")
        self.assertIsNone(normalize_currency(None))


if __name__ == '__main__':
    unittest.main()
