"""
================================================================================
MediaShelf - Taxonomy API Routes
================================================================================
Flask blueprint for genre/theme catalogs.

ENDPOINTS:
  GET  /api/taxonomy/genres?kind=anime|manga   - Distinct genres in the collection
  GET  /api/taxonomy/themes?kind=anime|manga   - Distinct themes in the collection
  POST /api/taxonomy/normalize                 - Deduplicate one delimited field
================================================================================
"""

from flask import Blueprint, jsonify, request
import logging

from ..database import get_db_session
from ..services.taxonomy_service import get_all_genres, get_all_themes
from ..taxonomy import get_taxonomy_config
from .validators import MAX_ITEMS_LENGTH, validate_fields, validate_kind, validate_taxonomy

logger = logging.getLogger(__name__)

taxonomy_api_bp = Blueprint('taxonomy_api', __name__)


def _catalog(harvest, label: str):
    kind = request.args.get('kind') or None
    error = validate_kind(kind, required=False)
    if error:
        return jsonify({'error': error}), 400

    try:
        with get_db_session() as session:
            terms = harvest(session, kind)
        return jsonify({label: terms, 'count': len(terms), 'kind': kind})
    except Exception as e:
        logger.error(f"{label.capitalize()} catalog failed: {e}")
        return jsonify({'error': str(e)}), 500


@taxonomy_api_bp.route('/api/taxonomy/genres', methods=['GET'])
def list_genres():
    """
    Returns:
        {"genres": ["Action", "Shounen", ...], "count": 2, "kind": null}
    """
    return _catalog(get_all_genres, 'genres')


@taxonomy_api_bp.route('/api/taxonomy/themes', methods=['GET'])
def list_themes():
    return _catalog(get_all_themes, 'themes')


@taxonomy_api_bp.route('/api/taxonomy/normalize', methods=['POST'])
def normalize_items():
    """
    Deduplicate one comma-joined genre or theme field.

    Request:
        {"items": "Shounen, Action, Shōnen", "taxonomy": "genre"}

    Returns:
        {"items": "Shounen, Action", "taxonomy": "genre"}
    """
    payload = request.get_json(silent=True) or {}
    error = validate_fields(payload, [('items', str, MAX_ITEMS_LENGTH)]) or \
        validate_taxonomy(payload.get('taxonomy'))
    if error:
        return jsonify({'error': error}), 400

    taxonomy = payload['taxonomy']
    canonicalizer = get_taxonomy_config().canonicalizer(taxonomy)
    return jsonify({
        'items': canonicalizer.deduplicate_delimited(payload['items']),
        'taxonomy': taxonomy
    })
