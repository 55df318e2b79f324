"""
================================================================================
MediaShelf - Catalog Models
================================================================================
Canonical, provider-agnostic search models.

Every provider adapter maps its native response shape into SearchResult.
Native shapes (TMDB media items, Google Books volumes) never leave their
adapter module.
================================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# =============================================================================
# ENUMS
# =============================================================================

class SearchMediaType(str, Enum):
    """Media types a search can target."""
    MOVIE = "movie"
    TV_SHOW = "tv_show"
    BOOK = "book"

    @property
    def label(self) -> str:
        return MEDIA_TYPE_LABELS[self]


MEDIA_TYPE_LABELS = {
    SearchMediaType.MOVIE: "Movies",
    SearchMediaType.TV_SHOW: "Serials",
    SearchMediaType.BOOK: "Books",
}


class ResultSource(str, Enum):
    """Provider tag carried by every canonical item."""
    TMDB = "tmdb"
    GOOGLE_BOOKS = "google_books"


# =============================================================================
# DATA MODELS
# =============================================================================

@dataclass(frozen=True)
class CanonicalQuery:
    """A validated search query."""
    text: str
    media_type: SearchMediaType = SearchMediaType.MOVIE


@dataclass(frozen=True)
class SearchResult:
    """
    Normalized search result.

    Created once per provider item by an adapter and never mutated.
    The id is provider-qualified ("tmdb_123", "google_books_abc") and is
    the identity used for deduplication.
    """
    id: str
    title: str
    media_type: SearchMediaType
    source: ResultSource
    subtitle: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    year: Optional[int] = None
    rating: Optional[float] = None
    genres: Optional[List[str]] = None
    external_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'title': self.title,
            'subtitle': self.subtitle,
            'description': self.description,
            'imageUrl': self.image_url,
            'year': self.year,
            'rating': self.rating,
            'genres': self.genres,
            'type': self.media_type.value,
            'source': self.source.value,
            'externalId': self.external_id
        }


@dataclass
class ProviderPage:
    """One page (or offset window) of canonical items from a provider."""
    items: List[SearchResult] = field(default_factory=list)
    total_pages: int = 0
    total_results: int = 0


@dataclass
class SearchResponse:
    """What the caller receives for every search."""
    results: List[SearchResult] = field(default_factory=list)
    total_results: int = 0
    has_more: bool = False

    @classmethod
    def empty(cls) -> "SearchResponse":
        return cls(results=[], total_results=0, has_more=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'results': [result.to_dict() for result in self.results],
            'totalResults': self.total_results,
            'hasMore': self.has_more
        }
