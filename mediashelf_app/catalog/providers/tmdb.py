"""
================================================================================
MediaShelf - TMDB Provider
================================================================================
REST client for The Movie Database (v3).

Endpoints used:
  - /search/movie, /search/tv   (page-paginated, 20 items per page)
  - /genre/movie/list, /genre/tv/list

Movie and TV items share one native shape but read different fields:
  movie -> title, release_date
  tv    -> name,  first_air_date

Genre ids are translated through a per-type GenreCache (24h freshness).

API Docs: https://developer.themoviedb.org/reference/intro/getting-started
================================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

from ...config import TMDBConfig
from ...http_client import RequestExecutor, RetryPolicy
from ..genres import GenreCache
from ..models import ProviderPage, ResultSource, SearchMediaType, SearchResult
from .base import BaseCatalogProvider, ProviderError, parse_rating, parse_year

logger = logging.getLogger(__name__)


MOVIE = "movie"
TV = "tv"


# =============================================================================
# NATIVE RESPONSE SHAPES
# =============================================================================

@dataclass(frozen=True)
class TMDBMediaItem:
    """One entry of a TMDB search response, tagged with its media subtype."""
    id: int
    media_type: str  # "movie" | "tv"
    title: Optional[str] = None
    name: Optional[str] = None
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
    first_air_date: Optional[str] = None
    genre_ids: List[int] = field(default_factory=list)
    vote_average: Optional[float] = None

    @classmethod
    def from_json(cls, data: dict, media_type: str) -> "TMDBMediaItem":
        # Search endpoints are per-type, so the subtype comes from the endpoint
        is_movie = media_type == MOVIE
        return cls(
            id=int(data['id']),
            media_type=media_type,
            title=data.get('title') if is_movie else None,
            name=None if is_movie else data.get('name'),
            overview=data.get('overview') or None,
            poster_path=data.get('poster_path'),
            release_date=data.get('release_date') if is_movie else None,
            first_air_date=None if is_movie else data.get('first_air_date'),
            genre_ids=[g for g in data.get('genre_ids') or [] if isinstance(g, int)],
            vote_average=parse_rating(data.get('vote_average'))
        )


@dataclass(frozen=True)
class TMDBSearchPage:
    page: int
    results: List[TMDBMediaItem]
    total_pages: int
    total_results: int

    @classmethod
    def from_json(cls, data: dict, media_type: str) -> "TMDBSearchPage":
        return cls(
            page=data.get('page', 1),
            results=[TMDBMediaItem.from_json(item, media_type) for item in data.get('results') or []],
            total_pages=data.get('total_pages', 0),
            total_results=data.get('total_results', 0)
        )


# =============================================================================
# PROVIDER
# =============================================================================

class TMDBProvider(BaseCatalogProvider):
    """
    TMDB movie and TV catalog.

    Requires an API key (TMDB_API_KEY). Genre maps are cached per type and
    the mapping from ids to names is synchronous.
    """

    id = "tmdb"
    name = "TMDB"
    source = ResultSource.TMDB
    user_agent = "TMDB-Client/1.0"

    retry_policy = RetryPolicy(
        max_retries=3,
        timeout=10.0,
        base_delay=1.0,
        exponential_backoff=False
    )

    SEARCH_ENDPOINTS = {
        MOVIE: '/search/movie',
        TV: '/search/tv',
    }

    GENRE_ENDPOINTS = {
        MOVIE: '/genre/movie/list',
        TV: '/genre/tv/list',
    }

    def __init__(
        self,
        config: TMDBConfig,
        executor: Optional[RequestExecutor] = None,
        movie_genres: Optional[GenreCache] = None,
        tv_genres: Optional[GenreCache] = None
    ):
        super().__init__(executor)
        self.config = config
        self.base_url = config.base_url
        self.genre_caches: Dict[str, GenreCache] = {
            MOVIE: movie_genres or GenreCache(MOVIE),
            TV: tv_genres or GenreCache(TV),
        }

    # =========================================================================
    # SEARCH
    # =========================================================================

    async def search_movies(self, query: str, page: int = 1) -> TMDBSearchPage:
        return await self._search(MOVIE, query, page)

    async def search_tv_shows(self, query: str, page: int = 1) -> TMDBSearchPage:
        return await self._search(TV, query, page)

    async def search_page(
        self,
        query: str,
        page: int,
        media_type: SearchMediaType
    ) -> ProviderPage:
        """
        Fetch one search page and map it to canonical items.

        Args:
            query: Search text
            page: 1-based page number
            media_type: MOVIE or TV_SHOW

        Returns:
            ProviderPage with items, total_pages, total_results
        """
        kind = MOVIE if media_type == SearchMediaType.MOVIE else TV
        native = await self._search(kind, query, page)
        return ProviderPage(
            items=[self.to_search_result(item) for item in native.results],
            total_pages=native.total_pages,
            total_results=native.total_results
        )

    async def _search(self, kind: str, query: str, page: int) -> TMDBSearchPage:
        if not query or not query.strip():
            raise ValueError("Query parameter is required")

        params = {
            'api_key': self.config.api_key,
            'query': query.strip(),
            'page': page,
            'language': self.config.language,
            'include_adult': 'false',
        }
        data = await self._request(self.SEARCH_ENDPOINTS[kind], params)

        try:
            return TMDBSearchPage.from_json(data, kind)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ProviderError(self.id, f"malformed {kind} search response: {e}") from e

    # =========================================================================
    # GENRES
    # =========================================================================

    async def get_genre_map(self, kind: str, force_refresh: bool = False) -> Dict[int, str]:
        """
        Get the genre id -> name map for "movie" or "tv".

        Served from cache while fresh (24h); fetched on first use, when
        stale, or when force_refresh is set.
        """
        cache = self._genre_cache(kind)

        async def fetch() -> Dict[int, str]:
            data = await self._request(
                self.GENRE_ENDPOINTS[kind],
                {'api_key': self.config.api_key, 'language': self.config.language}
            )
            genres = {}
            for genre in (data or {}).get('genres') or []:
                if isinstance(genre, dict) and isinstance(genre.get('id'), int) \
                        and isinstance(genre.get('name'), str):
                    genres[genre['id']] = genre['name']
            return genres

        return await cache.get(fetch, force_refresh=force_refresh)

    def map_genre_ids(self, kind: str, ids: Optional[List[int]]) -> Optional[List[str]]:
        """Synchronous id -> name lookup. Never triggers a request."""
        return self._genre_cache(kind).map_ids(ids)

    def _genre_cache(self, kind: str) -> GenreCache:
        if kind not in self.genre_caches:
            raise ValueError(f"Unknown TMDB genre type: {kind}")
        return self.genre_caches[kind]

    # =========================================================================
    # MAPPING
    # =========================================================================

    def to_search_result(self, item: TMDBMediaItem) -> SearchResult:
        """Map a TMDB media item to a SearchResult."""
        is_movie = item.media_type == MOVIE
        title = item.title if is_movie else item.name
        date = item.release_date if is_movie else item.first_air_date

        return SearchResult(
            id=f"tmdb_{item.id}",
            title=title or '',
            subtitle=item.overview,
            description=item.overview,
            image_url=f"{self.config.image_base_url}{item.poster_path}" if item.poster_path else None,
            year=parse_year(date),
            rating=item.vote_average,
            genres=self.map_genre_ids(MOVIE if is_movie else TV, item.genre_ids),
            media_type=SearchMediaType.MOVIE if is_movie else SearchMediaType.TV_SHOW,
            source=self.source,
            external_id=str(item.id)
        )
