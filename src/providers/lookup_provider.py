"""
Symbol Lookup Provider Abstract Base Class

Defines the interface for reference-data services that turn a free-text
query (ISIN, ticker or security name) into candidate securities.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from abc import ABC, abstractmethod

from activity import SecurityReference


class LookupProvider(ABC):
    """Abstract base class for symbol lookup providers."""

    @abstractmethod
    def lookup(self, query: str) -> list[SecurityReference]:
        """
        Search securities matching a query.

        Args:
            query: ISIN, ticker symbol or (partial) security name

        Returns:
            Candidate securities in the order ranked by the service, each with
            at least a symbol and a currency. Empty list when nothing matches.

        Raises:
            RemoteError: If the service is unreachable, answers with an error,
                or keeps rejecting the credentials
        """
