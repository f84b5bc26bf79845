"""
================================================================================
MediaShelf - Lookup API Routes
================================================================================
Flask blueprint for cross-catalog title lookup.

ENDPOINTS:
  GET  /api/lookup/anime?q=...&all_sources=0|1   - Search anime catalogs
  GET  /api/lookup/manga?q=...&all_sources=0|1   - Search manga catalogs
  GET  /api/lookup/sources?kind=anime|manga      - List catalogs and priority

A failing catalog never turns into an error response: the caller only
sees "some results" or "no results".
================================================================================
"""

from flask import Blueprint, current_app, jsonify, request
import asyncio
import logging

from ..lookup.models import ContentKind
from ..lookup.service import LookupService
from .validators import MAX_QUERY_LENGTH, parse_bool, sanitize_string, validate_kind

logger = logging.getLogger(__name__)

# Create blueprint
lookup_api_bp = Blueprint('lookup_api', __name__)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def run_async(coro):
    """
    Run async coroutine in sync Flask context.

    Flask routes are sync, but the lookup engine is async.
    This helper bridges the gap.
    """
    try:
        loop = asyncio.get_event_loop()
    except RuntimeError:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)

    return loop.run_until_complete(coro)


def _make_service() -> LookupService:
    """
    Fresh LookupService for one request.

    Tests install a factory in app.config['LOOKUP_SERVICE_FACTORY'].
    """
    factory = current_app.config.get('LOOKUP_SERVICE_FACTORY')
    if factory is not None:
        return factory()
    return LookupService(current_app.config['LOOKUP_SETTINGS'])


def _lookup(kind: ContentKind):
    if 'q' not in request.args:
        return jsonify({'error': 'Missing query parameter q'}), 400
    raw_query = request.args['q']
    if len(raw_query) > MAX_QUERY_LENGTH:
        return jsonify({'error': f"Query exceeds max length {MAX_QUERY_LENGTH}"}), 400
    # Blank query: no catalog is contacted, results are empty
    query = sanitize_string(raw_query, max_length=MAX_QUERY_LENGTH).strip()
    try_all_sources = parse_bool(request.args.get('all_sources'))

    try:
        async def _search():
            async with _make_service() as lookup:
                return await lookup.search(kind, query, try_all_sources)

        results = run_async(_search())

        return jsonify({
            'query': query,
            'kind': kind.value,
            'all_sources': try_all_sources,
            'results': [candidate.to_dict() for candidate in results],
            'count': len(results)
        })

    except Exception as e:
        logger.error(f"Lookup failed for '{query}': {e}")
        return jsonify({'error': str(e)}), 500


# =============================================================================
# LOOKUP ROUTES
# =============================================================================

@lookup_api_bp.route('/api/lookup/anime', methods=['GET'])
def lookup_anime():
    """
    Search anime across catalogs.

    Returns:
        {
            "query": "le septième prince",
            "kind": "anime",
            "all_sources": false,
            "results": [{"source_id": "jikan", "title": "...", ...}],
            "count": 1
        }
    """
    return _lookup(ContentKind.ANIME)


@lookup_api_bp.route('/api/lookup/manga', methods=['GET'])
def lookup_manga():
    """Search manga across catalogs (same shape as /api/lookup/anime)."""
    return _lookup(ContentKind.MANGA)


@lookup_api_bp.route('/api/lookup/sources', methods=['GET'])
def lookup_sources():
    """
    List catalogs for one kind, in the order they are queried.

    Returns:
        {
            "kind": "anime",
            "sources": [{"name": "jikan", "priority": 1, "available": true}, ...],
            "available_count": 2
        }
    """
    kind = request.args.get('kind', ContentKind.ANIME.value)
    error = validate_kind(kind)
    if error:
        return jsonify({'error': error}), 400

    service = _make_service()
    try:
        sources = service.describe_sources(ContentKind(kind))
    finally:
        run_async(service.close())

    return jsonify({
        'kind': kind,
        'sources': sources,
        'available_count': sum(1 for s in sources if s['available'])
    })
