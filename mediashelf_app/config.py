"""
================================================================================
MediaShelf - Lookup Configuration
================================================================================
Environment-driven settings for the catalog lookup engine.

Values come from the process environment (a .env file is loaded by the
package __init__ via python-dotenv):

  JIKAN_BASE_URL          Jikan v4 REST root
  ANILIST_URL             AniList GraphQL endpoint
  MAL_API_URL             Official MyAnimeList API v2 root
  MAL_CLIENT_ID           Client ID for the official API (optional)
  LOOKUP_TIMEOUT          Per-request timeout in seconds
  LOOKUP_MAX_RETRIES      Retries per request on 429/5xx/transport errors
  LOOKUP_ENABLED_SOURCES  Comma list of adapter names (empty = all)
  EXCLUSION_LIST_PATH     Curated list of terms excluded from taxonomy
================================================================================
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_EXCLUSION_LIST = os.path.join(BASE_DIR, 'data', 'excluded_terms.txt')


def _env_list(name: str) -> Tuple[str, ...]:
    raw = os.environ.get(name, '')
    return tuple(part.strip().lower() for part in raw.split(',') if part.strip())


@dataclass(frozen=True)
class Settings:
    """Immutable lookup settings, built once and passed explicitly."""

    jikan_base_url: str = "https://api.jikan.moe/v4"
    anilist_url: str = "https://graphql.anilist.co"
    mal_api_url: str = "https://api.myanimelist.net/v2"
    mal_client_id: Optional[str] = None

    timeout: float = 10.0
    max_retries: int = 3

    # Empty tuple = every registered adapter
    enabled_sources: Tuple[str, ...] = field(default_factory=tuple)

    exclusion_list_path: str = DEFAULT_EXCLUSION_LIST

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        return cls(
            jikan_base_url=os.environ.get('JIKAN_BASE_URL', cls.jikan_base_url).rstrip('/'),
            anilist_url=os.environ.get('ANILIST_URL', cls.anilist_url),
            mal_api_url=os.environ.get('MAL_API_URL', cls.mal_api_url).rstrip('/'),
            mal_client_id=os.environ.get('MAL_CLIENT_ID') or None,
            timeout=float(os.environ.get('LOOKUP_TIMEOUT', cls.timeout)),
            max_retries=max(1, int(os.environ.get('LOOKUP_MAX_RETRIES', cls.max_retries))),
            enabled_sources=_env_list('LOOKUP_ENABLED_SOURCES'),
            exclusion_list_path=os.environ.get('EXCLUSION_LIST_PATH', DEFAULT_EXCLUSION_LIST),
        )

    def source_enabled(self, name: str) -> bool:
        """True if the adapter is allowed by LOOKUP_ENABLED_SOURCES."""
        return not self.enabled_sources or name.lower() in self.enabled_sources
