"""
================================================================================
MediaShelf - Search Result Deduplicator
================================================================================
Drops repeated items collected during fan-out.

Problem:
  Overlapping TMDB pages and the two Google Books strategies (title-anchored
  and free-text) return the same work more than once.

Solution:
  Identity is the provider-qualified id ("tmdb_42", "google_books_xyz").
  First occurrence wins, order is preserved, one pass with a seen-set.
================================================================================
"""

import logging
from typing import Iterable, List, Set

from ..catalog.models import SearchResult

logger = logging.getLogger(__name__)


def dedupe(results: Iterable[SearchResult]) -> List[SearchResult]:
    """
    Remove duplicate results by id, keeping first-seen order.

    Idempotent: dedupe(dedupe(x)) == dedupe(x).
    """
    seen: Set[str] = set()
    unique: List[SearchResult] = []

    for result in results:
        if result.id in seen:
            continue
        seen.add(result.id)
        unique.append(result)

    return unique


class SearchDeduplicator:
    """Stateless wrapper used by the search service, logs the reduction."""

    def deduplicate(self, results: List[SearchResult]) -> List[SearchResult]:
        unique = dedupe(results)
        if len(unique) != len(results):
            logger.debug(f"Deduplicated {len(results)} results into {len(unique)} unique items")
        return unique
