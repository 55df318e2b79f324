"""Query validation for the search engine."""

import re
from typing import Any, Optional

from ..catalog.models import CanonicalQuery, SearchMediaType

# Latin letters, digits, whitespace and a small punctuation set
ALLOWED_QUERY_PATTERN = re.compile(r"^[a-zA-Z0-9\s\-'.,!?]+$", re.ASCII)

# Longer input is rejected, never truncated
MAX_QUERY_LENGTH = 200


def parse_media_type(value: Any) -> Optional[SearchMediaType]:
    """
    Resolve a media type value.

    Returns:
        SearchMediaType, MOVIE when value is empty, None when unknown
    """
    if value is None or value == '':
        return SearchMediaType.MOVIE
    if isinstance(value, SearchMediaType):
        return value
    try:
        return SearchMediaType(str(value).strip().lower())
    except ValueError:
        return None


def validate_query(raw_query: Any, media_type: Any = None) -> Optional[CanonicalQuery]:
    """
    Validate raw user input.

    Empty, whitespace-only, over-long and non-Latin input is not an error:
    it yields None, which the service turns into an empty response.

    Args:
        raw_query: User input, exactly as received
        media_type: SearchMediaType or its string value (default: movie)

    Returns:
        CanonicalQuery with trimmed text, or None
    """
    if not isinstance(raw_query, str):
        return None

    text = raw_query.strip()
    if not text or len(text) > MAX_QUERY_LENGTH or not ALLOWED_QUERY_PATTERN.match(text):
        return None

    resolved = parse_media_type(media_type) or SearchMediaType.MOVIE
    return CanonicalQuery(text=text, media_type=resolved)
