"""
================================================================================
MediaShelf - Google Books Provider
================================================================================
REST client for the Google Books volumes API (v1).

Unlike TMDB, Google Books is offset-paginated:
  GET /volumes?q=...&startIndex=<offset>&maxResults=<limit>

Two query styles are exposed:
  - search()          free-text query
  - search_by_title() title-anchored query ("intitle:<query>")

API Docs: https://developers.google.com/books/docs/v1/using
================================================================================
"""

from dataclasses import dataclass, field
from typing import List, Optional
import logging

from ...config import GoogleBooksConfig
from ...http_client import RequestExecutor
from ..models import ProviderPage, ResultSource, SearchMediaType, SearchResult
from .base import BaseCatalogProvider, ProviderError, parse_rating, parse_year

logger = logging.getLogger(__name__)


# Google Books rejects maxResults above 40
MAX_RESULTS_LIMIT = 40


# =============================================================================
# NATIVE RESPONSE SHAPES
# =============================================================================

@dataclass(frozen=True)
class GoogleBooksVolume:
    id: str
    title: Optional[str] = None
    authors: List[str] = field(default_factory=list)
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    published_date: Optional[str] = None
    average_rating: Optional[float] = None
    categories: List[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict) -> "GoogleBooksVolume":
        info = data.get('volumeInfo') or {}
        image_links = info.get('imageLinks') or {}
        return cls(
            id=str(data['id']),
            title=info.get('title'),
            authors=[a for a in info.get('authors') or [] if a],
            description=info.get('description'),
            thumbnail=image_links.get('thumbnail'),
            published_date=info.get('publishedDate'),
            average_rating=parse_rating(info.get('averageRating')),
            categories=[c for c in info.get('categories') or [] if c]
        )


@dataclass(frozen=True)
class GoogleBooksPage:
    items: List[GoogleBooksVolume]
    total_items: int

    @classmethod
    def from_json(cls, data: dict) -> "GoogleBooksPage":
        return cls(
            items=[GoogleBooksVolume.from_json(item) for item in data.get('items') or []],
            total_items=data.get('totalItems', 0)
        )


# =============================================================================
# PROVIDER
# =============================================================================

class GoogleBooksProvider(BaseCatalogProvider):
    """Google Books volume search. Requires GOOGLE_BOOKS_API_KEY."""

    id = "google_books"
    name = "Google Books"
    source = ResultSource.GOOGLE_BOOKS

    def __init__(self, config: GoogleBooksConfig, executor: Optional[RequestExecutor] = None):
        super().__init__(executor)
        self.config = config
        self.base_url = config.base_url

    async def search(self, query: str, offset: int = 0, limit: int = MAX_RESULTS_LIMIT) -> ProviderPage:
        """
        Free-text volume search.

        Args:
            query: Search text
            offset: startIndex of the window
            limit: Window size (capped at 40)

        Returns:
            ProviderPage with items and total_results (totalItems)
        """
        return await self._search(query, offset, limit)

    async def search_by_title(
        self,
        query: str,
        offset: int = 0,
        limit: int = MAX_RESULTS_LIMIT
    ) -> ProviderPage:
        """Title-anchored volume search."""
        return await self._search(f"intitle:{query}", offset, limit)

    async def _search(self, q: str, offset: int, limit: int) -> ProviderPage:
        params = {
            'q': q,
            'startIndex': max(0, offset),
            'maxResults': max(1, min(limit, MAX_RESULTS_LIMIT)),
            'key': self.config.api_key,
            'langRestrict': self.config.lang_restrict,
            'printType': self.config.print_type,
        }
        data = await self._request('/volumes', params)

        try:
            native = GoogleBooksPage.from_json(data or {})
        except (KeyError, TypeError, AttributeError) as e:
            raise ProviderError(self.id, f"malformed volumes response: {e}") from e

        return ProviderPage(
            items=[self.to_search_result(volume) for volume in native.items],
            total_results=native.total_items
        )

    def to_search_result(self, volume: GoogleBooksVolume) -> SearchResult:
        """Map a Google Books volume to a SearchResult. Authors become the subtitle."""
        return SearchResult(
            id=f"google_books_{volume.id}",
            title=volume.title or '',
            subtitle=', '.join(volume.authors) or None,
            description=volume.description,
            image_url=volume.thumbnail,
            year=parse_year(volume.published_date),
            rating=volume.average_rating,
            genres=list(volume.categories) or None,
            media_type=SearchMediaType.BOOK,
            source=self.source,
            external_id=volume.id
        )
