"""Lightweight request validation helpers."""

from typing import Any, Optional, Tuple

from ..catalog.models import SearchMediaType
from ..search.validator import parse_media_type


def validate_search_params(
    query: Any,
    media_type: Any
) -> Tuple[Any, Optional[SearchMediaType], Optional[str]]:
    """
    Validate search query-string parameters.

    The query is handed on untouched; the search engine decides whether it
    is searchable. Only an unknown mediaType is a request error.

    Returns:
        Tuple of (query, media_type, error_or_none)
    """
    resolved = parse_media_type(media_type)
    if resolved is None:
        allowed = ', '.join(t.value for t in SearchMediaType)
        return query, None, f"Unknown mediaType '{media_type}'. Expected one of: {allowed}"
    return query, resolved, None
