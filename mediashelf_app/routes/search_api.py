"""
================================================================================
MediaShelf - Search API Routes
================================================================================
Flask blueprint exposing the federated search engine.

ENDPOINTS:
  GET /api/search?query=<text>&mediaType=<movie|tv_show|book>
  GET /api/search/media-types
================================================================================
"""

import asyncio
import logging
from typing import Optional

from flask import Blueprint, current_app, jsonify, request

from ..catalog.models import SearchMediaType
from ..log import log
from .validators import validate_search_params

logger = logging.getLogger(__name__)

search_bp = Blueprint('search_api', __name__, url_prefix='/api/search')


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def run_async(coro):
    """
    Run async coroutine in sync Flask context.

    Flask routes are sync, but the search engine is async. Each call gets
    its own event loop.
    """
    return asyncio.run(coro)


def _error(message: str, detail: Optional[str] = None, code: str = 'invalid_request', status: int = 400):
    payload = {'error': message, 'code': code}
    if detail:
        payload['detail'] = detail
    return jsonify(payload), status


def _search_service():
    return current_app.extensions['search_service']


# =============================================================================
# ROUTES
# =============================================================================

@search_bp.route('', methods=['GET'])
def search():
    """
    Federated media search.

    Query:
        query      free text (Latin letters, digits, basic punctuation)
        mediaType  movie (default) | tv_show | book

    Returns:
        {
            "results": [{"id": "tmdb_155", "title": "The Dark Knight", ...}],
            "totalResults": 1,
            "hasMore": false
        }
    """
    query, media_type, error = validate_search_params(
        request.args.get('query'),
        request.args.get('mediaType')
    )
    if error:
        return _error('Invalid search parameters', detail=error)

    try:
        response = run_async(_search_service().search(query, media_type))
    except Exception as e:
        logger.exception(f"Search failed for '{query}' ({media_type.value})")
        return _error('Search failed', detail=str(e), code='search_failed', status=500)

    log(f"Search '{query}' ({media_type.value}): {response.total_results} results")
    return jsonify(response.to_dict())


@search_bp.route('/media-types', methods=['GET'])
def media_types():
    """List the supported media types with their display labels."""
    return jsonify({
        'mediaTypes': [
            {'value': media_type.value, 'label': media_type.label}
            for media_type in SearchMediaType
        ]
    })
