"""
Taxonomy Service - genre/theme catalogs over the stored collection.

Harvests the comma-joined genre and theme fields of every CatalogEntry,
runs them through the vocabulary canonicalizer and returns one label per
concept, sorted for display.

Writes go the other way: a picked lookup Candidate is stored with its
genres/themes already deduplicated, so the stored fields stay clean.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..lookup.models import Candidate, ContentKind
from ..models import CatalogEntry
from ..taxonomy import TaxonomyConfig, get_taxonomy_config
from ..taxonomy.canonicalizer import JOINER, split_terms

logger = logging.getLogger(__name__)


def _harvest(session: Session, column, kind: Optional[str]) -> List[str]:
    """Every raw term of one column, in storage order."""
    query = session.query(column).filter(column.isnot(None))
    if kind:
        query = query.filter(CatalogEntry.kind == ContentKind(kind).value)

    terms: List[str] = []
    for (value,) in query.order_by(CatalogEntry.id):
        terms.extend(split_terms(value))
    return terms


def get_all_genres(
    session: Session,
    kind: Optional[str] = None,
    config: Optional[TaxonomyConfig] = None
) -> List[str]:
    """
    Distinct genres across the collection.

    Args:
        session: Database session
        kind: 'anime', 'manga' or None for both
        config: Taxonomy config (defaults to the process-wide one)

    Returns:
        Sorted representative labels
    """
    config = config or get_taxonomy_config()
    raw = _harvest(session, CatalogEntry.genres, kind)
    genres = config.canonicalizer('genre').aggregate(raw)
    logger.debug(f"Genre catalog: {len(raw)} raw terms -> {len(genres)} genres")
    return genres


def get_all_themes(
    session: Session,
    kind: Optional[str] = None,
    config: Optional[TaxonomyConfig] = None
) -> List[str]:
    """Distinct themes across the collection (see get_all_genres)."""
    config = config or get_taxonomy_config()
    raw = _harvest(session, CatalogEntry.themes, kind)
    themes = config.canonicalizer('theme').aggregate(raw)
    logger.debug(f"Theme catalog: {len(raw)} raw terms -> {len(themes)} themes")
    return themes


def normalize_entry_taxonomy(entry: CatalogEntry, config: Optional[TaxonomyConfig] = None) -> CatalogEntry:
    """Rewrite an entry's genres/themes in deduplicated form (in place)."""
    config = config or get_taxonomy_config()
    entry.genres = config.canonicalizer('genre').deduplicate_delimited(entry.genres)
    entry.themes = config.canonicalizer('theme').deduplicate_delimited(entry.themes)
    return entry


def add_candidate(
    session: Session,
    candidate: Candidate,
    config: Optional[TaxonomyConfig] = None
) -> CatalogEntry:
    """
    Store a lookup result as a new catalog entry.

    Returns:
        The added (flushed) CatalogEntry
    """
    status = candidate.status.value if candidate.status else None
    rating = candidate.content_rating.value if candidate.content_rating else None

    entry = CatalogEntry(
        kind=ContentKind(candidate.kind).value,
        title=candidate.title,
        alternative_titles=JOINER.join(candidate.secondary_titles) or None,
        description=candidate.description or None,
        cover_url=candidate.cover_url,
        status=status,
        start_year=candidate.start_year,
        end_year=candidate.end_year,
        genres=JOINER.join(candidate.genres) or None,
        themes=JOINER.join(candidate.themes) or None,
        demographic=candidate.demographic,
        content_rating=rating,
        episodes=candidate.episodes,
        chapters=candidate.chapters,
        volumes=candidate.volumes,
        source_id=candidate.source_id,
        external_id=candidate.external_id,
    )

    if candidate.source_id in ('jikan', 'myanimelist'):
        entry.mal_id = _as_int(candidate.external_id)
    else:
        entry.mal_id = candidate.mal_id
    if candidate.source_id == 'anilist':
        entry.anilist_id = _as_int(candidate.external_id)

    normalize_entry_taxonomy(entry, config)
    session.add(entry)
    session.flush()

    logger.info(f"📚 Added {entry.kind} '{entry.title}' from {entry.source_id}")
    return entry


def _as_int(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
