"""
================================================================================
MediaShelf - Catalog Package
================================================================================
External catalog providers and the canonical models they map into.

Components:
  - models.py    - SearchResult, SearchResponse, SearchMediaType
  - genres.py    - Time-bounded genre id -> name cache
  - providers/   - TMDB and Google Books adapters
================================================================================
"""

from .genres import GenreCache
from .models import (
    CanonicalQuery,
    ProviderPage,
    ResultSource,
    SearchMediaType,
    SearchResponse,
    SearchResult,
)

__all__ = [
    'CanonicalQuery',
    'GenreCache',
    'ProviderPage',
    'ResultSource',
    'SearchMediaType',
    'SearchResponse',
    'SearchResult',
]
