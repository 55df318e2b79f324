"""
Time-bounded genre id -> name cache.

One instance per TMDB catalog type (movie, tv). The map is replaced
wholesale on refresh, never mutated in place, so concurrent readers always
see a complete map and two racing refreshes simply leave the last one.

Usage:
    cache = GenreCache("movie", ttl=24 * 3600)

    # Async: fetch on first use, stale refresh, or forced refresh
    await cache.get(fetch_genres)

    # Sync: never touches the network
    cache.map_ids([28, 12])  # ['Action', 'Adventure']
"""

import logging
import time
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

GENRE_CACHE_TTL = 24 * 60 * 60  # 24h

GenreFetcher = Callable[[], Awaitable[Dict[int, str]]]


class GenreCache:
    """Process-wide, read-mostly genre map for one catalog type."""

    def __init__(
        self,
        kind: str,
        ttl: float = GENRE_CACHE_TTL,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize cache.

        Args:
            kind: Catalog type this cache serves ("movie" or "tv")
            ttl: Freshness window in seconds (default: 24 hours)
            clock: Time source (injectable for tests)
        """
        self.kind = kind
        self.ttl = ttl
        self._clock = clock
        self._genres: Optional[Dict[int, str]] = None
        self._fetched_at: Optional[float] = None

    @property
    def is_populated(self) -> bool:
        return self._genres is not None

    @property
    def is_fresh(self) -> bool:
        if self._genres is None or self._fetched_at is None:
            return False
        return self._clock() - self._fetched_at < self.ttl

    async def get(self, fetch: GenreFetcher, force_refresh: bool = False) -> Dict[int, str]:
        """
        Return the genre map, fetching it when needed.

        Fresh maps are returned without a network call. A missing map, a
        stale map or force_refresh triggers fetch(). When a refresh of an
        existing map fails, the stale map is kept and returned.

        Raises:
            Whatever fetch() raises, when there is no map to fall back to
        """
        if self.is_fresh and not force_refresh:
            return self._genres

        try:
            genres = await fetch()
        except Exception as e:
            if self._genres is not None:
                logger.warning(f"Genre refresh for '{self.kind}' failed, keeping stale map: {e}")
                return self._genres
            raise

        self.replace(genres)
        return genres

    def replace(self, genres: Dict[int, str]) -> None:
        """Swap in a new map (copy) and stamp the refresh time."""
        self._genres = dict(genres)
        self._fetched_at = self._clock()
        logger.debug(f"Genre cache '{self.kind}' refreshed with {len(genres)} genres")

    def map_ids(self, ids: Optional[Iterable[int]]) -> Optional[List[str]]:
        """
        Translate genre ids to names synchronously.

        Returns None when the cache is not populated yet, when no ids were
        given, or when none of the ids are known.
        """
        genres = self._genres
        if genres is None or not ids:
            return None

        names = [genres[genre_id] for genre_id in ids if genre_id in genres]
        return names or None

    def clear(self) -> None:
        self._genres = None
        self._fetched_at = None

    def __repr__(self):
        size = len(self._genres) if self._genres is not None else 0
        return f"<GenreCache(kind='{self.kind}', size={size}, fresh={self.is_fresh})>"
