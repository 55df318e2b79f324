"""
================================================================================
MediaShelf - Relevance Pipeline
================================================================================
Filters and ranks canonical search results against the query.

Pipeline (fixed order):
  1. filter_latin()         drop titles/subtitles containing Cyrillic
  2. filter_title_match()   normalized title contains the query, or contains
                            every query word in order
  3. rank()                 stable sort: relevance -> completeness -> rating

Books additionally go through is_book_relevant() while they are collected.

The title filter and the relevance scorer share normalize(), so an item
that passes the filter is scored with exactly the same view of its title.

Scores:
  relevance     exact 100 | startswith 80 | contains 60 | words-in-order 40
                (first matching tier only)
                +20 when every query word appears in the title
                +(matching words / query words) * 10
  completeness  title 1, image 4, description or subtitle 3,
                rating > 0 2, year 1
================================================================================
"""

import re
from typing import List, Sequence

from ..catalog.models import SearchResult

_NON_WORD = re.compile(r'[^\w\s]', re.ASCII)
_WHITESPACE = re.compile(r'\s+', re.ASCII)
_CYRILLIC = re.compile(r'[\u0400-\u04FF]')

EXACT_MATCH_SCORE = 100
STARTS_WITH_SCORE = 80
CONTAINS_SCORE = 60
WORDS_IN_ORDER_SCORE = 40
ALL_WORDS_PRESENT_BONUS = 20
WORD_RATIO_BONUS = 10


# =============================================================================
# NORMALIZATION
# =============================================================================

def normalize(text: str) -> str:
    """
    Normalize text for matching.

    Examples:
        "The Dark Knight Rises" -> "the dark knight rises"
        "Spider-Man: No Way Home" -> "spider man no way home"
        "Crouching Tiger 臥虎藏龍" -> "crouching tiger"

    Word characters are ASCII only; any other letter is treated like
    punctuation.
    """
    if not text:
        return ""
    text = _NON_WORD.sub(' ', text.lower())
    return _WHITESPACE.sub(' ', text).strip()


def query_words(normalized_query: str) -> List[str]:
    return [word for word in normalized_query.split() if word]


def contains_words_in_order(text: str, words: Sequence[str]) -> bool:
    """
    True if every word occurs in text, each one at or after the position
    where the previous word ended. Words need not be contiguous.
    """
    if not words:
        return True
    if len(words) == 1:
        return words[0] in text

    position = 0
    for word in words:
        index = text.find(word, position)
        if index == -1:
            return False
        position = index + len(word)
    return True


# =============================================================================
# FILTERS
# =============================================================================

def is_latin(result: SearchResult) -> bool:
    text = f"{result.title or ''} {result.subtitle or ''}"
    return not _CYRILLIC.search(text)


def filter_latin(results: List[SearchResult]) -> List[SearchResult]:
    """Drop results whose title or subtitle contains Cyrillic characters."""
    return [result for result in results if is_latin(result)]


def matches_title(result: SearchResult, normalized_query: str, words: Sequence[str]) -> bool:
    title = normalize(result.title)
    return normalized_query in title or contains_words_in_order(title, words)


def filter_title_match(results: List[SearchResult], query: str) -> List[SearchResult]:
    normalized_query = normalize(query)
    words = query_words(normalized_query)
    return [result for result in results if matches_title(result, normalized_query, words)]


def is_book_relevant(book: SearchResult, query: str) -> bool:
    """
    Relevance gate for Google Books results.

    Queries of two characters or fewer pass everything. Otherwise a query
    word must appear in the title or the authors (subtitle); a description
    match only counts for queries of at most two words.
    """
    if len(query) <= 2:
        return True

    words = query.lower().split()
    title = (book.title or '').lower()
    authors = (book.subtitle or '').lower()
    description = (book.description or '').lower()

    if any(word in title for word in words):
        return True
    if any(word in authors for word in words):
        return True
    return len(words) <= 2 and any(word in description for word in words)


# =============================================================================
# SCORING
# =============================================================================

def relevance_score(result: SearchResult, query: str) -> float:
    normalized_query = normalize(query)
    title = normalize(result.title)
    words = query_words(normalized_query)

    score = 0.0
    if title == normalized_query:
        score += EXACT_MATCH_SCORE
    elif title.startswith(normalized_query):
        score += STARTS_WITH_SCORE
    elif normalized_query in title:
        score += CONTAINS_SCORE
    elif contains_words_in_order(title, words):
        score += WORDS_IN_ORDER_SCORE

    if not words:
        return score

    matching = sum(1 for word in words if word in title)
    if matching == len(words):
        score += ALL_WORDS_PRESENT_BONUS
    score += (matching / len(words)) * WORD_RATIO_BONUS

    return score


def completeness_score(result: SearchResult) -> int:
    score = 0
    if result.title:
        score += 1
    if result.image_url:
        score += 4
    if result.description or result.subtitle:
        score += 3
    if result.rating and result.rating > 0:
        score += 2
    if result.year:
        score += 1
    return score


def rank(results: List[SearchResult], query: str) -> List[SearchResult]:
    """
    Order results best-first.

    Stable: results tied on relevance, completeness and rating keep their
    encounter order.
    """
    return sorted(
        results,
        key=lambda r: (
            -relevance_score(r, query),
            -completeness_score(r),
            -(r.rating or 0)
        )
    )


def apply(results: List[SearchResult], query: str) -> List[SearchResult]:
    """Run the full pipeline: language filter, title filter, ranking."""
    return rank(filter_title_match(filter_latin(results), query), query)
