"""Catalog adapters for the lookup engine."""

from .base import (
    SourceAdapter, HttpSourceAdapter, AdapterError, AdapterUnavailable, RateLimiter
)
from .jikan import JikanAdapter
from .anilist import AniListAdapter
from .myanimelist import MyAnimeListAdapter

# Registered adapter classes, in default priority order
ADAPTER_CLASSES = (JikanAdapter, AniListAdapter, MyAnimeListAdapter)

__all__ = [
    'SourceAdapter', 'HttpSourceAdapter', 'AdapterError', 'AdapterUnavailable',
    'RateLimiter', 'JikanAdapter', 'AniListAdapter', 'MyAnimeListAdapter',
    'ADAPTER_CLASSES',
]
