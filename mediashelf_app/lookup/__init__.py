"""
================================================================================
MediaShelf - Catalog Lookup Package
================================================================================
Cross-catalog title lookup with query expansion and deduplication.

Components:
  - query_expander.py - French title -> search variants
  - orchestrator.py - Sequential fallback search over adapters
  - deduplicator.py - Normalized-title deduplication
  - adapters/ - Jikan, AniList, MyAnimeList API
  - service.py - search_anime / search_manga entry points
================================================================================
"""

from .models import (
    Candidate, QueryVariant, ContentKind, AnimeStatus, MangaStatus,
    ContentRating, VariantOrigin, SearchMode
)
from .query_expander import QueryExpander, expand_query
from .deduplicator import normalize_title, dedupe
from .orchestrator import FallbackSearch
from .service import LookupService, search_anime, search_manga

__all__ = [
    'Candidate', 'QueryVariant', 'ContentKind', 'AnimeStatus', 'MangaStatus',
    'ContentRating', 'VariantOrigin', 'SearchMode', 'QueryExpander', 'expand_query',
    'normalize_title', 'dedupe', 'FallbackSearch', 'LookupService',
    'search_anime', 'search_manga',
]
