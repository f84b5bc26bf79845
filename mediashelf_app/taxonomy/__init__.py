"""
================================================================================
MediaShelf - Taxonomy Package
================================================================================
Genre/theme canonicalization and exclusion filtering.

Components:
  - dictionaries.py - raw term -> canonical term tables (genre, theme)
  - exclusions.py - curated exclusion list + fallback names
  - canonicalizer.py - bulk and per-record deduplication

Configuration is immutable: TaxonomyConfig is built once per process by
get_taxonomy_config() and can also be constructed directly (tests).
================================================================================
"""

import functools
import logging
from dataclasses import dataclass

from ..config import Settings
from .dictionaries import CanonicalDictionary, GENRES, THEMES
from .exclusions import ExclusionSet, load_exclusion_set, normalize_name
from .canonicalizer import (
    VocabularyCanonicalizer, deduplicate_using_translations,
    deduplicate_delimited_items, normalize_dash_separated, is_excluded
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxonomyConfig:
    """Dictionaries and exclusion set shared by every canonicalizer."""

    genres: CanonicalDictionary
    themes: CanonicalDictionary
    exclusions: ExclusionSet

    def dictionary(self, taxonomy: str) -> CanonicalDictionary:
        """Dictionary by name ("genre" or "theme")."""
        if taxonomy in ('genre', 'genres'):
            return self.genres
        if taxonomy in ('theme', 'themes'):
            return self.themes
        raise ValueError(f"Unknown taxonomy '{taxonomy}'")

    def canonicalizer(self, taxonomy: str) -> VocabularyCanonicalizer:
        return VocabularyCanonicalizer(self.dictionary(taxonomy), self.exclusions)


def load_taxonomy_config(settings: Settings) -> TaxonomyConfig:
    """Build a TaxonomyConfig from settings (reads the exclusion list)."""
    return TaxonomyConfig(
        genres=GENRES,
        themes=THEMES,
        exclusions=load_exclusion_set(settings.exclusion_list_path),
    )


@functools.lru_cache(maxsize=1)
def get_taxonomy_config() -> TaxonomyConfig:
    """Process-wide TaxonomyConfig, loaded on first use."""
    config = load_taxonomy_config(Settings.from_env())
    logger.info(
        f"Taxonomy loaded: {len(config.genres)} genre terms, "
        f"{len(config.themes)} theme terms, {len(config.exclusions)} exclusions"
    )
    return config


__all__ = [
    'TaxonomyConfig', 'load_taxonomy_config', 'get_taxonomy_config',
    'CanonicalDictionary', 'GENRES', 'THEMES', 'ExclusionSet',
    'load_exclusion_set', 'normalize_name', 'VocabularyCanonicalizer',
    'deduplicate_using_translations', 'deduplicate_delimited_items',
    'normalize_dash_separated', 'is_excluded',
]
