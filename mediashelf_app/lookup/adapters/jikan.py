"""
================================================================================
MediaShelf - Jikan Adapter (MyAnimeList mirror)
================================================================================
REST client for Jikan v4, the unofficial MyAnimeList API.

Jikan Features:
  - Same data as MyAnimeList, no authentication required
  - 60 requests/min, 3 requests/sec rate limit
  - A numeric query is treated as a MAL ID first

API Docs: https://docs.api.jikan.moe/
================================================================================
"""

from typing import List, Optional
import logging

import httpx

from .base import AdapterError, HttpSourceAdapter
from ..models import (
    Candidate, ContentKind, AnimeStatus, MangaStatus, ContentRating
)

logger = logging.getLogger(__name__)


ANIME_STATUS_MAP = {
    'Finished Airing': AnimeStatus.FINISHED,
    'Currently Airing': AnimeStatus.AIRING,
    'Not yet aired': AnimeStatus.NOT_YET_AIRED,
}

MANGA_STATUS_MAP = {
    'Finished': MangaStatus.FINISHED,
    'Publishing': MangaStatus.PUBLISHING,
    'On Hiatus': MangaStatus.HIATUS,
    'Discontinued': MangaStatus.CANCELLED,
    'Not yet published': MangaStatus.NOT_YET_PUBLISHED,
}

ANIME_FORMAT_MAP = {
    'TV': 'TV',
    'Movie': 'Movie',
    'OVA': 'OVA',
    'ONA': 'ONA',
    'Special': 'Special',
    'Music': 'Music',
}


def convert_mal_rating(rating: Optional[str]) -> Optional[ContentRating]:
    """
    Map a MAL age rating onto safe / suggestive / erotica.

    Examples:
        "Rx - Hentai" -> EROTICA
        "R+ - Mild Nudity" -> EROTICA
        "R - 17+ (violence & profanity)" -> SUGGESTIVE
        "PG-13 - Teens 13 or older" -> SAFE
    """
    if not rating:
        return None
    if 'Rx' in rating or 'Hentai' in rating:
        return ContentRating.EROTICA
    if 'R+' in rating or 'R-' in rating:
        return ContentRating.EROTICA
    if 'R - 17' in rating or '17+' in rating:
        return ContentRating.SUGGESTIVE
    return ContentRating.SAFE


def _year(date_range: Optional[dict], key: str) -> Optional[int]:
    """Year of a Jikan {from, to, prop} date range."""
    if not date_range:
        return None
    prop_year = ((date_range.get('prop') or {}).get(key) or {}).get('year')
    if prop_year:
        return prop_year
    value = date_range.get(key)
    if value and len(value) >= 4 and value[:4].isdigit():
        return int(value[:4])
    return None


def _names(items: Optional[list]) -> tuple:
    return tuple(item['name'] for item in items or [] if item.get('name'))


class JikanAdapter(HttpSourceAdapter):
    """
    Jikan v4 adapter for anime or manga.

    One instance per content kind; the kind selects the endpoint
    (/anime or /manga) and the parser.
    """

    name = "jikan"
    priority = 1
    rate_limit = 60  # 60 requests per minute (actually 3/sec)

    search_limit = 10

    @property
    def base_url(self) -> str:
        return self.settings.jikan_base_url

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.kind.value}"

    async def search(self, text: str) -> List[Candidate]:
        """
        Search MyAnimeList via Jikan.

        Numeric queries are tried as a MAL ID first; if that lookup fails
        the text search still runs.

        Args:
            text: Query variant

        Returns:
            List of Candidate objects
        """
        query = text.strip()
        if query.isdigit() and int(query) > 0:
            found = await self._get_by_mal_id(int(query))
            if found:
                return [found]

        response = await self._request(
            "GET",
            self.endpoint,
            params={"q": query, "limit": self.search_limit}
        )

        if not response or not response.get('data'):
            return []

        return self._parse_all(response['data'], self._parse)

    async def _get_by_mal_id(self, mal_id: int) -> Optional[Candidate]:
        try:
            response = await self._request("GET", f"{self.endpoint}/{mal_id}")
        except (AdapterError, httpx.HTTPError) as e:
            logger.warning(f"{self.name}: MAL ID {mal_id} lookup failed, falling back to text search: {e}")
            return None

        data = (response or {}).get('data')
        if not isinstance(data, dict) or not data.get('mal_id'):
            return None
        return self._parse_all([data], self._parse)[0]

    def _parse(self, entry: dict) -> Candidate:
        """Dispatch to the kind-specific parser."""
        if self.kind == ContentKind.ANIME:
            return self._parse_anime(entry)
        return self._parse_manga(entry)

    def _common(self, entry: dict) -> dict:
        titles = []
        for key in ('title_english', 'title_japanese'):
            if entry.get(key):
                titles.append(entry[key])
        for synonym in entry.get('title_synonyms') or []:
            if synonym and synonym not in titles:
                titles.append(synonym)

        images = (entry.get('images') or {}).get('jpg') or {}

        return {
            'source_id': self.name,
            'external_id': str(entry.get('mal_id', '')),
            'kind': self.kind,
            'title': entry.get('title') or entry.get('title_english') or '',
            'secondary_titles': tuple(titles),
            'description': entry.get('synopsis') or '',
            'cover_url': images.get('large_image_url') or images.get('image_url'),
            'genres': _names(entry.get('genres')),
            'themes': _names(entry.get('themes')),
            'score': entry.get('score'),
            'score_scale': 10,
            'content_rating': convert_mal_rating(entry.get('rating')),
            'mal_id': entry.get('mal_id'),
        }

    def _parse_anime(self, anime: dict) -> Candidate:
        duration = None
        if anime.get('duration'):
            digits = anime['duration'].split(' ', 1)[0]
            duration = int(digits) if digits.isdigit() else None

        return Candidate(
            **self._common(anime),
            status=ANIME_STATUS_MAP.get(anime.get('status')),
            start_year=_year(anime.get('aired'), 'from'),
            end_year=_year(anime.get('aired'), 'to'),
            season=anime.get('season'),
            season_year=anime.get('year'),
            episodes=anime.get('episodes'),
            episode_duration=duration,
            media_format=ANIME_FORMAT_MAP.get(anime.get('type'), anime.get('type')),
            studios=_names(anime.get('studios')),
        )

    def _parse_manga(self, manga: dict) -> Candidate:
        demographics = _names(manga.get('demographics'))
        return Candidate(
            **self._common(manga),
            status=MANGA_STATUS_MAP.get(manga.get('status')),
            start_year=_year(manga.get('published'), 'from'),
            end_year=_year(manga.get('published'), 'to'),
            demographic=demographics[0] if demographics else None,
            media_format=manga.get('type'),
            chapters=manga.get('chapters'),
            volumes=manga.get('volumes'),
        )
