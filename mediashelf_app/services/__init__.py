"""
MediaShelf Services Module

Provides services on top of the stored collection:
- taxonomy_service: genre/theme catalogs and normalized writes
"""

from .taxonomy_service import (
    get_all_genres, get_all_themes, normalize_entry_taxonomy, add_candidate
)

__all__ = ['get_all_genres', 'get_all_themes', 'normalize_entry_taxonomy', 'add_candidate']
