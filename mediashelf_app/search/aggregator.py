"""
================================================================================
MediaShelf - Catalog Aggregator
================================================================================
Fans one validated query out to the catalog provider for its media type.
Every request of one collect() call shares one HTTP connection pool.

Routing:
  movie   -> TMDB /search/movie, pages 1..10
  tv_show -> TMDB /search/tv,    pages 1..10
  book    -> Google Books, two strategies in parallel:
               title-anchored  3 offset windows of 40
               free-text       1 offset window of 40

All page/window tasks of one search are in flight at once and joined
together; the fixed page count is the concurrency bound. A failed task
(exhausted retries, timeout, HTTP error) contributes nothing and never
cancels its siblings.
================================================================================
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Dict, List

from ..catalog.models import CanonicalQuery, ProviderPage, SearchMediaType, SearchResult
from ..catalog.providers.base import ProviderError
from ..catalog.providers.google_books import GoogleBooksProvider
from ..catalog.providers.tmdb import MOVIE, TV, TMDBProvider
from ..http_client import http_session
from .relevance import is_book_relevant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchConfig:
    max_pages: int
    max_results: int
    parallel_requests: int


SEARCH_CONFIGS: Dict[SearchMediaType, SearchConfig] = {
    SearchMediaType.MOVIE: SearchConfig(max_pages=10, max_results=20, parallel_requests=5),
    SearchMediaType.TV_SHOW: SearchConfig(max_pages=10, max_results=20, parallel_requests=5),
    SearchMediaType.BOOK: SearchConfig(max_pages=5, max_results=40, parallel_requests=3),
}


async def gather_pages(tasks: List[Awaitable[ProviderPage]], label: str) -> List[SearchResult]:
    """
    Await every task and flatten the successful pages in task order.

    Failed tasks are logged and skipped.
    """
    pages = await asyncio.gather(*tasks, return_exceptions=True)

    items: List[SearchResult] = []
    for i, page in enumerate(pages):
        if isinstance(page, Exception):
            logger.error(f"{label}: request {i + 1}/{len(pages)} failed: {page}")
            continue
        items.extend(page.items)
    return items


class CatalogAggregator:
    """Collects raw canonical items for a query from the right provider."""

    def __init__(
        self,
        tmdb: TMDBProvider,
        google_books: GoogleBooksProvider,
        configs: Dict[SearchMediaType, SearchConfig] = SEARCH_CONFIGS
    ):
        self.tmdb = tmdb
        self.google_books = google_books
        self.configs = configs

    async def collect(self, query: CanonicalQuery) -> List[SearchResult]:
        """
        Collect items across all pages/strategies, before dedup and ranking.

        Never raises for provider failures; an outage yields fewer (or no)
        items. All requests of one call share a single connection pool.
        """
        async with http_session():
            if query.media_type == SearchMediaType.BOOK:
                return await self._search_books(query.text)
            return await self._search_media(query.text, query.media_type)

    async def close(self):
        await self.tmdb.close()
        await self.google_books.close()

    # =========================================================================
    # MOVIES / TV
    # =========================================================================

    async def _search_media(self, text: str, media_type: SearchMediaType) -> List[SearchResult]:
        config = self.configs[media_type]
        kind = MOVIE if media_type == SearchMediaType.MOVIE else TV

        # Genre names are mapped synchronously while pages are converted
        try:
            await self.tmdb.get_genre_map(kind)
        except ProviderError as e:
            logger.warning(f"Genre map for '{kind}' unavailable, genres omitted: {e}")

        tasks = [
            self.tmdb.search_page(text, page, media_type)
            for page in range(1, config.max_pages + 1)
        ]
        items = await gather_pages(tasks, f"tmdb/{kind}")
        logger.info(f"TMDB {kind} search for '{text}': {len(items)} raw results")
        return items

    # =========================================================================
    # BOOKS
    # =========================================================================

    async def _search_books(self, text: str) -> List[SearchResult]:
        config = self.configs[SearchMediaType.BOOK]

        title_tasks = [
            self.google_books.search_by_title(text, i * config.max_results, config.max_results)
            for i in range(config.parallel_requests)
        ]
        general_tasks = [
            self.google_books.search(text, i * config.max_results, config.max_results)
            for i in range(max(1, config.parallel_requests // 2))
        ]

        title_results, general_results = await asyncio.gather(
            gather_pages(title_tasks, "google_books/title"),
            gather_pages(general_tasks, "google_books/general")
        )

        items = [book for book in title_results + general_results if is_book_relevant(book, text)]
        logger.info(
            f"Google Books search for '{text}': {len(title_results)} title + "
            f"{len(general_results)} general, {len(items)} relevant"
        )
        return items
