"""
================================================================================
MediaShelf - Source Adapter Base
================================================================================
Boundary between the lookup engine and external catalogs.

Every catalog gets one adapter per content kind. An adapter:
  - Accepts a query string and returns a list of Candidate objects
  - Returns [] for "nothing found" (never raises for that)
  - Raises AdapterError / httpx.HTTPError only for transport or parse failure
  - Reports is_available = False when it lacks a required credential

HTTP adapters share the rate limiter, lazily created httpx client and
retry loop defined here.
================================================================================
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Dict
import time
import asyncio
import logging

import httpx

from ...config import Settings
from ..models import Candidate, ContentKind


logger = logging.getLogger(__name__)

# Raised by parsers on a payload of unexpected shape
PAYLOAD_ERRORS = (KeyError, TypeError, AttributeError, ValueError)


class AdapterError(Exception):
    """A catalog request failed (transport or unparseable payload)."""


class AdapterUnavailable(AdapterError):
    """The adapter cannot run at all (e.g. missing credential)."""


class RateLimiter:
    """
    Token bucket rate limiter for API requests.

    Keeps free-tier catalogs happy:
      - Jikan: 60/min (3/sec)
      - AniList: 90/min
      - MyAnimeList API: 60/min (conservative)
    """

    def __init__(self, requests_per_minute: int):
        """
        Initialize rate limiter.

        Args:
            requests_per_minute: Maximum requests allowed per minute
        """
        self.requests_per_minute = requests_per_minute
        self.min_interval = 60.0 / requests_per_minute  # Seconds between requests
        self.last_request = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self):
        """Wait until a request slot is available."""
        async with self._lock:
            now = time.time()
            time_since_last = now - self.last_request

            if time_since_last < self.min_interval:
                wait_time = self.min_interval - time_since_last
                logger.debug(f"Rate limit: waiting {wait_time:.2f}s")
                await asyncio.sleep(wait_time)

            self.last_request = time.time()


class SourceAdapter(ABC):
    """
    Abstract catalog adapter.

    Subclasses set `name` and `priority` (lower = queried first, and wins
    deduplication ties) and implement search().
    """

    name: str = "base"
    priority: int = 100

    def __init__(self, kind: ContentKind):
        self.kind = kind

    @property
    def is_available(self) -> bool:
        """False when configuration this adapter needs is missing."""
        return True

    @abstractmethod
    async def search(self, text: str) -> List[Candidate]:
        """
        Search the catalog.

        Args:
            text: Query variant (never modified)

        Returns:
            Candidates, possibly empty
        """
        pass

    async def close(self):
        """Release resources held by the adapter."""
        return None

    def __repr__(self):
        return f"<{self.__class__.__name__}(name='{self.name}', kind='{self.kind.value}', priority={self.priority})>"


class HttpSourceAdapter(SourceAdapter):
    """
    Adapter backed by an httpx.AsyncClient.

    Handles:
      - Rate limiting (token bucket)
      - Retries with backoff on 429, 5xx and transport errors
      - JSON decoding (bad JSON -> AdapterError)
    """

    # Rate limiting (requests per minute)
    rate_limit: int = 60

    # Retry configuration
    retry_delay: float = 1.0

    user_agent: str = "MediaShelf/1.0"

    def __init__(
        self,
        kind: ContentKind,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        super().__init__(kind)
        self.settings = settings or Settings()
        self.timeout = self.settings.timeout
        self.max_retries = self.settings.max_retries
        self.rate_limiter = RateLimiter(self.rate_limit)
        self._client = client
        self._owns_client = client is None

    def _headers(self) -> Dict[str, str]:
        return {
            'User-Agent': self.user_agent,
            'Accept': 'application/json'
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self._headers()
            )
            self._owns_client = True
        return self._client

    async def close(self):
        """Close HTTP client if we created it."""
        if self._client and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def _request(
        self,
        method: str,
        url: str,
        **kwargs
    ) -> Dict:
        """
        Make rate-limited HTTP request with retries.

        Args:
            method: HTTP method (GET, POST)
            url: Full URL
            **kwargs: Additional arguments for httpx

        Returns:
            JSON response as dict

        Raises:
            httpx.HTTPError: On request failure after retries
            AdapterError: On a body that is not a JSON object
        """
        client = await self._get_client()

        for attempt in range(self.max_retries):
            try:
                await self.rate_limiter.acquire()

                response = await client.request(method, url, **kwargs)
                response.raise_for_status()

                try:
                    payload = response.json()
                except ValueError as e:
                    raise AdapterError(f"{self.name}: invalid JSON from {url}: {e}") from e

                if not isinstance(payload, dict):
                    raise AdapterError(f"{self.name}: expected a JSON object from {url}")
                return payload

            except httpx.HTTPStatusError as e:
                retryable = e.response.status_code == 429 or e.response.status_code >= 500
                if retryable and attempt < self.max_retries - 1:
                    if e.response.status_code == 429:
                        wait_time = self.retry_delay * (2 ** attempt)  # Exponential backoff
                        logger.warning(f"{self.name}: Rate limited (429), waiting {wait_time}s")
                    else:
                        wait_time = self.retry_delay
                        logger.warning(
                            f"{self.name}: Server error ({e.response.status_code}), "
                            f"retry {attempt + 1}/{self.max_retries}"
                        )
                    await asyncio.sleep(wait_time)
                    continue
                raise

            except httpx.RequestError as e:
                if attempt < self.max_retries - 1:
                    logger.warning(
                        f"{self.name}: Request error ({e}), "
                        f"retry {attempt + 1}/{self.max_retries}"
                    )
                    await asyncio.sleep(self.retry_delay)
                    continue
                raise

        raise AdapterError(f"{self.name}: Max retries exceeded")

    def _parse_all(self, items: Any, parse: Callable[[Any], Candidate]) -> List[Candidate]:
        """
        Parse a list of catalog entries.

        A payload of the wrong shape (not a list, null entries, missing
        keys) is a failed attempt, reported as AdapterError.
        """
        if not isinstance(items, list):
            raise AdapterError(f"{self.name}: expected a list of entries, got {type(items).__name__}")
        try:
            return [parse(item) for item in items]
        except PAYLOAD_ERRORS as e:
            raise AdapterError(f"{self.name}: unexpected entry shape: {e!r}") from e

    def __repr__(self):
        return (f"<{self.__class__.__name__}(name='{self.name}', kind='{self.kind.value}', "
                f"priority={self.priority}, rate_limit={self.rate_limit}/min)>")
