"""
================================================================================
MediaShelf - Lookup Models
================================================================================
Common shapes shared by every catalog adapter.

Each adapter turns its catalog's response into Candidate objects so the
orchestrator and deduplicator never see a provider-specific payload.
Candidates and query variants live for one search call only.
================================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union
from enum import Enum


# =============================================================================
# ENUMS
# =============================================================================

class ContentKind(str, Enum):
    """Kind of media being looked up."""
    ANIME = "anime"
    MANGA = "manga"


class AnimeStatus(str, Enum):
    """Airing status across all catalogs."""
    FINISHED = "finished"
    AIRING = "airing"
    NOT_YET_AIRED = "not_yet_aired"


class MangaStatus(str, Enum):
    """Publication status across all catalogs."""
    FINISHED = "finished"
    PUBLISHING = "publishing"
    HIATUS = "hiatus"
    CANCELLED = "cancelled"
    NOT_YET_PUBLISHED = "not_yet_published"


class ContentRating(str, Enum):
    """Coarse age classification."""
    SAFE = "safe"
    SUGGESTIVE = "suggestive"
    EROTICA = "erotica"


class VariantOrigin(str, Enum):
    """Transformation that produced a query variant."""
    IDENTITY = "identity"
    ARTICLE_STRIPPED = "article_stripped"
    TRANSLATED = "translated"
    TRANSLATED_ARTICLE_STRIPPED = "translated_article_stripped"


class SearchMode(str, Enum):
    """
    Stop policy of the fallback search.

    FIRST_SUCCESS stops at the first source that returns anything.
    EXHAUSTIVE queries every configured source.
    """
    FIRST_SUCCESS = "first_success"
    EXHAUSTIVE = "exhaustive"

    @classmethod
    def from_try_all_sources(cls, try_all_sources: bool) -> "SearchMode":
        return cls.EXHAUSTIVE if try_all_sources else cls.FIRST_SUCCESS


# =============================================================================
# DATA MODELS
# =============================================================================

@dataclass(frozen=True)
class QueryVariant:
    """A query string derived from the user's input."""
    text: str
    origin: VariantOrigin = VariantOrigin.IDENTITY


@dataclass(frozen=True)
class Candidate:
    """
    One normalized search result from a single catalog.

    Identity for deduplication is the normalized title only; the other
    fields ride along with whichever copy is kept.
    """

    # =========================================================================
    # IDENTIFIERS
    # =========================================================================

    source_id: str        # "jikan", "anilist", "myanimelist"
    external_id: str      # ID in that catalog
    kind: ContentKind
    title: str

    # English / native / romaji / synonyms, in catalog order
    secondary_titles: Tuple[str, ...] = ()

    description: str = ""
    cover_url: Optional[str] = None
    status: Optional[Union[AnimeStatus, MangaStatus]] = None

    # =========================================================================
    # TEMPORAL
    # =========================================================================

    start_year: Optional[int] = None
    end_year: Optional[int] = None
    season: Optional[str] = None        # anime only
    season_year: Optional[int] = None   # anime only

    # =========================================================================
    # TAXONOMY & RATING
    # =========================================================================

    genres: Tuple[str, ...] = ()
    themes: Tuple[str, ...] = ()
    demographic: Optional[str] = None
    content_rating: Optional[ContentRating] = None

    score: Optional[float] = None
    score_scale: int = 10  # MAL scores out of 10, AniList out of 100

    # =========================================================================
    # KIND-SPECIFIC
    # =========================================================================

    episodes: Optional[int] = None
    episode_duration: Optional[int] = None  # minutes
    media_format: Optional[str] = None      # TV, Movie, OVA, Manga, Novel...
    studios: Tuple[str, ...] = ()

    chapters: Optional[int] = None
    volumes: Optional[int] = None

    # Extra identifiers the catalog exposes (e.g. AniList's idMal)
    mal_id: Optional[int] = field(default=None)

    @property
    def genres_text(self) -> str:
        """Genres as the comma-joined string stored on catalog records."""
        return ', '.join(self.genres)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'source_id': self.source_id,
            'external_id': self.external_id,
            'kind': self.kind.value,
            'title': self.title,
            'secondary_titles': list(self.secondary_titles),
            'description': self.description,
            'cover_url': self.cover_url,
            'status': self.status.value if self.status else None,
            'start_year': self.start_year,
            'end_year': self.end_year,
            'season': self.season,
            'season_year': self.season_year,
            'genres': self.genres_text,
            'themes': ', '.join(self.themes),
            'demographic': self.demographic,
            'content_rating': self.content_rating.value if self.content_rating else None,
            'score': self.score,
            'score_scale': self.score_scale,
            'episodes': self.episodes,
            'episode_duration': self.episode_duration,
            'media_format': self.media_format,
            'studios': ', '.join(self.studios) or None,
            'chapters': self.chapters,
            'volumes': self.volumes,
            'mal_id': self.mal_id,
        }
