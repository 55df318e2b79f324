"""
================================================================================
MediaShelf - Base Catalog Provider
================================================================================
Abstract base class for all external catalog providers.

Providers:
  - TMDB (movies, TV shows)
  - Google Books (books)

Each provider:
  - Sends requests through the shared RequestExecutor (timeout/retry/backoff)
  - Parses its native response into provider-specific dataclasses
  - Maps native items to SearchResult with a single pure function
================================================================================
"""

import asyncio
import logging
import math
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from ...http_client import RequestError, RequestExecutor, RetriesExhaustedError, RetryPolicy
from ..models import ResultSource, SearchResult


logger = logging.getLogger(__name__)

_YEAR_PATTERN = re.compile(r'^\s*(\d{4})')


class ProviderError(Exception):
    """A provider call failed (exhausted retries, HTTP error, bad payload)."""

    def __init__(self, provider_id: str, message: str):
        self.provider_id = provider_id
        super().__init__(f"{provider_id}: {message}")


def parse_year(date_string: Optional[str]) -> Optional[int]:
    """
    Extract the 4-digit year from a provider date string.

    Handles "2010-07-15", "2010-07" and "2010". Empty or unparseable
    strings yield None.
    """
    if not date_string:
        return None
    match = _YEAR_PATTERN.match(date_string)
    if not match:
        return None
    return int(match.group(1))


def parse_rating(value: Any) -> Optional[float]:
    """Coerce a provider rating to float; anything non-numeric yields None."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        rating = float(value)
    except ValueError:
        return None
    return rating if math.isfinite(rating) else None


class BaseCatalogProvider(ABC):
    """
    Abstract base class for catalog providers.

    Subclasses set the class attributes and implement to_search_result().
    """

    # Provider identification
    id: str = "base"
    name: str = "Base Provider"
    source: ResultSource

    # API configuration
    base_url: str = ""

    # Retry configuration for every call to this provider
    retry_policy: RetryPolicy = RetryPolicy()

    user_agent: str = "MediaShelf/1.0"

    def __init__(self, executor: Optional[RequestExecutor] = None):
        self.executor = executor or RequestExecutor()

    async def close(self):
        await self.executor.close()

    async def _request(self, endpoint: str, params: Dict[str, Any]) -> Any:
        """
        GET a JSON endpoint of this provider.

        Raises:
            ProviderError: On exhausted retries, network failure, timeout,
                or a non-2xx final response
        """
        url = f"{self.base_url}{endpoint}"
        try:
            return await self.executor.execute_json(
                url,
                params=params,
                headers={'User-Agent': self.user_agent},
                policy=self.retry_policy
            )
        except (RequestError, RetriesExhaustedError, httpx.RequestError, asyncio.TimeoutError) as e:
            reason = str(e) or type(e).__name__
            logger.error(f"{self.id}: Failed to fetch from {endpoint}: {reason}")
            raise ProviderError(self.id, f"request to {endpoint} failed: {reason}") from e

    @abstractmethod
    def to_search_result(self, item: Any) -> SearchResult:
        """Map one native item to a SearchResult."""

    def __repr__(self):
        return f"<{self.__class__.__name__}(id='{self.id}')>"
