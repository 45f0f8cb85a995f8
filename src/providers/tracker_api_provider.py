"""
Portfolio Tracker Lookup Provider

Implementation of LookupProvider using the portfolio tracker's own symbol
lookup API. Requests are authenticated with a bearer token obtained from the
anonymous auth endpoint; an expired token is refreshed and the request
retried, up to const.MAX_AUTH_ATTEMPTS attempts in total.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging
from typing import Any

import requests

import constants as const
from activity import DataSource, SecurityReference
from exceptions import ConfigError, RemoteError
from providers.lookup_provider import LookupProvider


logger = logging.getLogger(__name__)


class TrackerApiProvider(LookupProvider):
    """Symbol lookup through the portfolio tracker API."""

    AUTH_ENDPOINT = "api/v1/auth/anonymous"
    LOOKUP_ENDPOINT = "api/v1/symbol/lookup"

    def __init__(self, base_url: str | None = None, secret: str | None = None,
                 timeout: float | None = None, max_attempts: int | None = None):
        """
        Initialize tracker provider.

        Args:
            base_url: Tracker URL (defaults to const.TRACKER_API_URL)
            secret: Access token used to request bearer tokens (defaults to const.TRACKER_API_SECRET)
            timeout: Per request timeout in seconds (defaults to const.LOOKUP_TIMEOUT)
            max_attempts: Attempts per query when unauthorized (defaults to const.MAX_AUTH_ATTEMPTS)
        """
        self.base_url = (base_url or const.TRACKER_API_URL or "").rstrip("/")
        self.secret = secret or const.TRACKER_API_SECRET
        if not self.base_url:
            raise ConfigError("TRACKER_API_URL")
        if not self.secret:
            raise ConfigError("TRACKER_API_SECRET")
        self.timeout = timeout or const.LOOKUP_TIMEOUT
        self.max_attempts = max_attempts or const.MAX_AUTH_ATTEMPTS
        self.token: str | None = None
        logger.info(f"Initialized tracker lookup provider for {self.base_url}")

    def _get(self, endpoint: str, params: dict[str, Any] | None = None,
             headers: dict[str, str] | None = None) -> requests.Response:
        url = f"{self.base_url}/{endpoint}"
        try:
            return requests.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.exceptions.Timeout:
            logger.error(f"Tracker API timeout for {endpoint}")
            raise RemoteError("Tracker API timeout")
        except requests.exceptions.RequestException as e:
            logger.error(f"Tracker API request failed: {e}")
            raise RemoteError(f"Tracker API request failed: {e}")

    def authenticate(self) -> str:
        """
        Request a fresh bearer token.

        Returns:
            The bearer token

        Raises:
            RemoteError: If the auth endpoint fails or returns no token
        """
        response = self._get(f"{self.AUTH_ENDPOINT}/{self.secret}")
        if response.status_code in (401, 403):
            logger.error("Tracker API rejected the access token")
            raise RemoteError("authentication failed", status_code=response.status_code)
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            logger.error(f"Tracker API HTTP error during authentication: {e}")
            raise RemoteError(f"Tracker API error: {e}", status_code=response.status_code)

        token = response.json().get("authToken")
        if not token:
            raise RemoteError("authentication failed: no token returned")

        logger.debug("Obtained new bearer token")
        self.token = token
        return token

    def lookup(self, query: str) -> list[SecurityReference]:
        """
        Search the tracker for securities matching the query.

        Args:
            query: ISIN, ticker symbol or security name

        Returns:
            Candidate securities, possibly empty

        Raises:
            RemoteError: On network/HTTP failure or after max_attempts
                unauthorized responses
        """
        for attempt in range(1, self.max_attempts + 1):
            token = self.token or self.authenticate()
            response = self._get(self.LOOKUP_ENDPOINT, params={"query": query},
                                 headers={"Authorization": f"Bearer {token}"})

            if response.status_code == 401:
                logger.warning(f"Unauthorized lookup for '{query}' (attempt {attempt}/{self.max_attempts}), refreshing token")
                self.token = None
                continue

            try:
                response.raise_for_status()
            except requests.exceptions.HTTPError as e:
                if response.status_code == 429:
                    logger.error("Tracker API rate limit exceeded")
                    raise RemoteError("Tracker API rate limit exceeded", status_code=429)
                logger.error(f"Tracker API HTTP error: {e}")
                raise RemoteError(f"Tracker API error: {e}", status_code=response.status_code)

            items = response.json().get("items", [])
            candidates = [
                SecurityReference(symbol=item["symbol"], currency=item.get("currency") or "",
                                  data_source=DataSource.EXTERNAL, name=item.get("name"))
                for item in items if item.get("symbol")
            ]
            logger.debug(f"Lookup '{query}' returned {len(candidates)} candidates")
            return candidates

        logger.error(f"Lookup for '{query}' unauthorized after {self.max_attempts} attempts")
        raise RemoteError("authentication failed", status_code=401)
