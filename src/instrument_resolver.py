"""
Instrument Resolver

Turns the weak identifiers found in a broker row (ISIN, ticker, name) into a
confirmed security whose currency matches the transaction.

Lookup order, each step only when the previous one found no candidate in the
expected currency:
1. ISIN (skipped when the ISIN has a manual override)
2. Ticker (the override symbol when present), then the ticker without its
   exchange suffix. Without a ticker, the symbol of the first ISIN candidate
   stripped of its exchange suffix is used.
3. Security name, or the name of the first ISIN candidate

Successful ISIN resolutions are cached for the duration of one conversion
run. Misses are not cached, so a recurring unknown ISIN is queried again.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import asyncio
import logging
import os

import constants as const
from activity import InstrumentQuery, SecurityReference
from brokers.casts import CURRENCY_ALIASES
from providers.lookup_provider import LookupProvider


logger = logging.getLogger(__name__)

# Longest prefix of a name retried when the full name finds nothing
PARTIAL_NAME_LENGTH = 20
# Queries longer than an ISIN are names and may be retried partially
PARTIAL_NAME_MIN_LENGTH = 12


class ResolutionCache:
    """
    ISIN to security cache owned by a single conversion run.

    Usage:
        cache = ResolutionCache()
        resolver = InstrumentResolver(provider, cache)
    """

    def __init__(self):
        self._entries: dict[str, SecurityReference] = {}
        self._metrics = {
            "cache_hits": 0,
            "cache_misses": 0,
            "remote_queries": 0,
        }

    def get(self, isin: str) -> SecurityReference | None:
        security = self._entries.get(isin)
        if security is None:
            self._metrics["cache_misses"] += 1
        else:
            self._metrics["cache_hits"] += 1
            logger.debug(f"ISIN {isin} found in cache as {security.symbol}")
        return security

    def put(self, isin: str, security: SecurityReference) -> None:
        self._entries[isin] = security

    def record_query(self) -> None:
        self._metrics["remote_queries"] += 1

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, isin: str) -> bool:
        return isin in self._entries

    def get_cache_stats(self) -> dict[str, int]:
        """
        Get cache performance statistics.

        Returns:
            Dictionary with entries, cache_hits, cache_misses and remote_queries
        """
        return {"entries": len(self._entries), **self._metrics}


def load_overrides(path: str | None = None) -> dict[str, str]:
    """
    Load manual ISIN to symbol overrides.

    The file holds one ISIN=SYMBOL pair per line; blank lines and lines
    starting with # are skipped. A missing file means no overrides.
    """
    path = path or const.ISIN_OVERRIDE_FILE
    if not os.path.exists(path):
        return {}

    overrides: dict[str, str] = {}
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                logger.warning(f"Skipping malformed override line: {line}")
                continue
            isin, symbol = (part.strip() for part in line.split("=", 1))
            overrides[isin] = symbol

    logger.info(f"Loaded {len(overrides)} ISIN overrides from {path}")
    return overrides


def normalize_currency(currency: str | None) -> str | None:
    if currency is None:
        return None
    return CURRENCY_ALIASES.get(currency, currency)


class InstrumentResolver:
    """Cascading security lookup with a run-scoped ISIN cache."""

    def __init__(self, provider: LookupProvider, cache: ResolutionCache,
                 overrides: dict[str, str] | None = None,
                 preferred_postfix: str | None = None):
        """
        Args:
            provider: Lookup service used for remote queries
            cache: Cache of this run, never shared between runs
            overrides: ISIN to symbol overrides
            preferred_postfix: Exchange suffix (e.g. '.AS') preferred among matching candidates
        """
        self.provider = provider
        self.cache = cache
        self.overrides = overrides or {}
        self.preferred_postfix = preferred_postfix

    async def resolve(self, query: InstrumentQuery) -> SecurityReference | None:
        """
        Resolve a query to a security in the expected currency.

        Args:
            query: Identifiers from the broker row

        Returns:
            The matching security, or None when the service knows no candidate
            in the expected currency

        Raises:
            RemoteError: If the lookup service fails
        """
        if query.isin:
            cached = self.cache.get(query.isin)
            if cached is not None:
                return cached

        ticker = query.ticker
        isin_overridden = bool(query.isin) and query.isin in self.overrides
        if isin_overridden:
            ticker = self.overrides[query.isin]
            logger.debug(f"Using override symbol {ticker} for ISIN {query.isin}")

        match = None
        isin_candidates: list[SecurityReference] = []
        if query.isin and not isin_overridden:
            isin_candidates = await self._candidates(query.isin)
            match = self.select(isin_candidates, query.expected_currency)

        if not ticker and isin_candidates:
            ticker = isin_candidates[0].symbol.split(".")[0]
            logger.debug(f"No ticker given for {query.isin}, trying listing symbol {ticker}")

        if match is None and ticker:
            match = await self._find(ticker, query.expected_currency)
            if match is None and "." in ticker:
                match = await self._find(ticker.split(".")[0], query.expected_currency)

        name = query.name
        if not name and isin_candidates:
            name = isin_candidates[0].name

        if match is None and name:
            match = await self._find(name, query.expected_currency)

        if match is None:
            logger.debug(f"No security found for {query.describe()} in {query.expected_currency}")
            return None

        if query.isin:
            self.cache.put(query.isin, match)

        logger.debug(f"Resolved {query.describe()} to {match.symbol}")
        return match

    async def lookup(self, text: str) -> list[SecurityReference]:
        self.cache.record_query()
        return await asyncio.to_thread(self.provider.lookup, text)

    async def _find(self, text: str, expected_currency: str | None) -> SecurityReference | None:
        return self.select(await self._candidates(text), expected_currency)

    async def _candidates(self, text: str) -> list[SecurityReference]:
        candidates = await self.lookup(text)

        partial = text[:PARTIAL_NAME_LENGTH]
        if not candidates and len(text) > PARTIAL_NAME_MIN_LENGTH and partial != text:
            logger.debug(f"No match for '{text}', trying partial name '{partial}'")
            candidates = await self.lookup(partial)

        return candidates

    def select(self, candidates: list[SecurityReference], expected_currency: str | None) -> SecurityReference | None:
        """
        Pick the candidate quoted in the expected currency.

        Without an expected currency the first candidate is taken. A GBP
        transaction also accepts pence (GBp) quotes when no GBP quote exists.
        """
        if not candidates:
            return None

        if expected_currency is None:
            return candidates[0]

        wanted = normalize_currency(expected_currency)
        matches = [c for c in candidates if normalize_currency(c.currency) == wanted]
        if not matches and wanted == "GBP":
            matches = [c for c in candidates if c.currency == "GBp"]

        if not matches:
            return None

        if self.preferred_postfix:
            for candidate in matches:
                if candidate.symbol.endswith(self.preferred_postfix):
                    return candidate

        return matches[0]
