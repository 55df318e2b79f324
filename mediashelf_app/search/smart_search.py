"""
================================================================================
MediaShelf - Search Service
================================================================================
Entry point of the federated search engine.

Flow:
  1. Validate the query (invalid -> empty response, no network activity)
  2. Serve from the short-lived result cache when possible
  3. Collect raw items from the provider(s) for the media type
  4. Deduplicate by provider-qualified id
  5. Language filter -> title-match filter -> ranking
  6. Build the response (hasMore is always false: one aggregation pass)

Usage:
    service = SearchService.from_env()
    response = await service.search("dark knight", "movie")
================================================================================
"""

import logging
import time
from typing import Any, Mapping, Optional

from ..catalog.models import SearchResponse
from ..catalog.providers.google_books import GoogleBooksProvider
from ..catalog.providers.tmdb import TMDBProvider
from ..config import GoogleBooksConfig, SearchSettings, TMDBConfig
from ..log import debug_log_event
from . import relevance
from .aggregator import CatalogAggregator
from .cache import SearchCache
from .deduplicator import SearchDeduplicator
from .validator import validate_query

logger = logging.getLogger(__name__)


class SearchService:
    """
    Federated media search: validate, aggregate, dedupe, filter, rank.

    Stateless per call apart from the genre caches (owned by the TMDB
    provider) and the result cache.
    """

    def __init__(
        self,
        aggregator: CatalogAggregator,
        cache: Optional[SearchCache] = None,
        deduplicator: Optional[SearchDeduplicator] = None
    ):
        self.aggregator = aggregator
        self.cache = cache or SearchCache(ttl=0)
        self.deduplicator = deduplicator or SearchDeduplicator()

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "SearchService":
        """
        Build the service from environment settings.

        Raises:
            ConfigurationError: A required API key is missing
        """
        tmdb = TMDBProvider(TMDBConfig.from_env(env))
        google_books = GoogleBooksProvider(GoogleBooksConfig.from_env(env))
        settings = SearchSettings.from_env(env)

        logger.info(
            f"Search service initialized (providers: {tmdb.name}, {google_books.name}; "
            f"cache ttl={settings.cache_ttl}s)"
        )
        return cls(
            aggregator=CatalogAggregator(tmdb, google_books),
            cache=SearchCache(ttl=settings.cache_ttl, max_size=settings.cache_size)
        )

    async def search(self, query: Any, media_type: Any = None) -> SearchResponse:
        """
        Search one media type across its catalog provider(s).

        Args:
            query: Raw user query
            media_type: "movie" (default), "tv_show" or "book"

        Returns:
            SearchResponse; empty for invalid queries or provider outages
        """
        canonical = validate_query(query, media_type)
        if canonical is None:
            logger.debug(f"Rejected query {query!r}")
            return SearchResponse.empty()

        cached = self.cache.get(canonical.text, canonical.media_type)
        if cached is not None:
            logger.info(f"Cache HIT for '{canonical.text}' ({canonical.media_type.value})")
            return cached

        start_time = time.time()

        raw_results = await self.aggregator.collect(canonical)
        unique = self.deduplicator.deduplicate(raw_results)
        ranked = relevance.apply(unique, canonical.text)

        response = SearchResponse(results=ranked, total_results=len(ranked), has_more=False)

        elapsed = time.time() - start_time
        logger.info(f"Final results for '{canonical.text}': {len(ranked)} ({elapsed:.2f}s)")
        debug_log_event({
            'event': 'search',
            'query': canonical.text,
            'media_type': canonical.media_type.value,
            'raw': len(raw_results),
            'unique': len(unique),
            'results': len(ranked),
            'duration_ms': int(elapsed * 1000)
        })

        # Empty responses usually mean an outage; let the next call retry
        if ranked:
            self.cache.set(canonical.text, canonical.media_type, response)

        return response

    async def close(self):
        await self.aggregator.close()
