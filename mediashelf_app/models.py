"""
================================================================================
MediaShelf - Database Models
================================================================================
SQLAlchemy models for the parts of the catalog the lookup and taxonomy
code touch.

  - CatalogEntry: one anime or manga in the collection. Genres and themes
    are stored as comma-joined strings, normalized on write through the
    taxonomy canonicalizer.
================================================================================
"""

from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, DateTime, Text, Index
from sqlalchemy.orm import declarative_base, declared_attr

Base = declarative_base()


# =============================================================================
# MIXINS
# =============================================================================

class TimestampMixin:
    """Adds created_at and updated_at timestamps to models."""
    @declared_attr
    def created_at(cls):
        return Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    @declared_attr
    def updated_at(cls):
        return Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)


# =============================================================================
# CATALOG
# =============================================================================

class CatalogEntry(Base, TimestampMixin):
    """An anime or manga saved to the collection."""
    __tablename__ = 'catalog_entries'

    id = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(String(10), nullable=False, index=True)  # 'anime' | 'manga'
    title = Column(String(500), nullable=False, index=True)
    alternative_titles = Column(Text)

    description = Column(Text)
    cover_url = Column(String(500))
    status = Column(String(50))
    start_year = Column(Integer)
    end_year = Column(Integer)

    # Comma-joined, deduplicated taxonomy
    genres = Column(Text)
    themes = Column(Text)
    demographic = Column(String(50))
    content_rating = Column(String(20))

    episodes = Column(Integer)
    chapters = Column(Integer)
    volumes = Column(Integer)

    # Where the record was looked up
    source_id = Column(String(50))
    external_id = Column(String(100))
    mal_id = Column(Integer, nullable=True)
    anilist_id = Column(Integer, nullable=True)

    __table_args__ = (
        Index('ix_catalog_entries_source', 'source_id', 'external_id'),
    )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'kind': self.kind,
            'title': self.title,
            'genres': self.genres,
            'themes': self.themes,
            'status': self.status,
            'start_year': self.start_year,
            'source_id': self.source_id,
            'external_id': self.external_id,
            'mal_id': self.mal_id,
            'anilist_id': self.anilist_id,
        }

    def __repr__(self):
        return f"<CatalogEntry(id={self.id}, kind='{self.kind}', title='{self.title}')>"
