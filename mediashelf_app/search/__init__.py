"""
================================================================================
MediaShelf - Search Package
================================================================================
Federated search over the catalog providers.

Components:
  - validator.py     - Query validation (Latin-only, non-empty)
  - aggregator.py    - Bounded concurrent fan-out to providers
  - deduplicator.py  - First-seen dedup by provider-qualified id
  - relevance.py     - Language filter, title filter, ranking
  - cache.py         - Short-lived result cache
  - smart_search.py  - SearchService tying it all together
================================================================================
"""

from .aggregator import CatalogAggregator
from .cache import SearchCache
from .deduplicator import SearchDeduplicator, dedupe
from .smart_search import SearchService
from .validator import parse_media_type, validate_query

__all__ = [
    'CatalogAggregator',
    'SearchCache',
    'SearchDeduplicator',
    'SearchService',
    'dedupe',
    'parse_media_type',
    'validate_query',
]
