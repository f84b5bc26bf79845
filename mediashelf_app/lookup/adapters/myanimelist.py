"""
================================================================================
MediaShelf - MyAnimeList Official API Adapter
================================================================================
REST client for the official MyAnimeList API v2.

Requires a client ID (MAL_CLIENT_ID). Without it the adapter reports
itself unavailable and the orchestrator skips it.

API Docs: https://myanimelist.net/apiconfig/references/api/v2
================================================================================
"""

from typing import Dict, List, Optional
import logging

from .base import HttpSourceAdapter, AdapterUnavailable
from ..models import Candidate, ContentKind, AnimeStatus, MangaStatus, ContentRating

logger = logging.getLogger(__name__)


STATUS_MAP = {
    'finished_airing': AnimeStatus.FINISHED,
    'currently_airing': AnimeStatus.AIRING,
    'not_yet_aired': AnimeStatus.NOT_YET_AIRED,
    'finished': MangaStatus.FINISHED,
    'currently_publishing': MangaStatus.PUBLISHING,
    'on_hiatus': MangaStatus.HIATUS,
    'discontinued': MangaStatus.CANCELLED,
    'not_yet_published': MangaStatus.NOT_YET_PUBLISHED,
}

RATING_MAP = {
    'g': ContentRating.SAFE,
    'pg': ContentRating.SAFE,
    'pg_13': ContentRating.SAFE,
    'r': ContentRating.SUGGESTIVE,
    'r+': ContentRating.EROTICA,
    'rx': ContentRating.EROTICA,
}

ANIME_FIELDS = ("alternative_titles,synopsis,main_picture,status,start_date,end_date,"
                "genres,mean,num_episodes,average_episode_duration,media_type,"
                "start_season,studios,rating")
MANGA_FIELDS = ("alternative_titles,synopsis,main_picture,status,start_date,end_date,"
                "genres,mean,num_chapters,num_volumes,media_type")


def _year(date: Optional[str]) -> Optional[int]:
    return int(date[:4]) if date and date[:4].isdigit() else None


class MyAnimeListAdapter(HttpSourceAdapter):
    """Official MyAnimeList API v2 adapter (client-ID authenticated)."""

    name = "myanimelist"
    priority = 3
    rate_limit = 60

    search_limit = 10

    @property
    def is_available(self) -> bool:
        return bool(self.settings.mal_client_id)

    def _auth_headers(self) -> Dict[str, str]:
        return {'X-MAL-CLIENT-ID': self.settings.mal_client_id or ''}

    async def search(self, text: str) -> List[Candidate]:
        """
        Search the official MyAnimeList API.

        Raises:
            AdapterUnavailable: MAL_CLIENT_ID is not configured
        """
        if not self.is_available:
            raise AdapterUnavailable(f"{self.name}: MAL_CLIENT_ID not configured")

        # MAL rejects queries shorter than 3 characters with a 400
        query = text.strip()
        if len(query) < 3:
            return []

        fields = ANIME_FIELDS if self.kind == ContentKind.ANIME else MANGA_FIELDS
        response = await self._request(
            "GET",
            f"{self.settings.mal_api_url}/{self.kind.value}",
            params={"q": query, "limit": self.search_limit, "fields": fields},
            headers=self._auth_headers()
        )

        return self._parse_all(response.get('data') or [], self._parse_item)

    def _parse_item(self, item: dict) -> Candidate:
        return self._parse(item['node'])

    def _parse(self, node: dict) -> Candidate:
        alt = node.get('alternative_titles') or {}
        secondary = [t for t in (alt.get('en'), alt.get('ja')) if t]
        secondary.extend(s for s in alt.get('synonyms') or [] if s and s not in secondary)

        common = dict(
            source_id=self.name,
            external_id=str(node.get('id', '')),
            kind=self.kind,
            title=node.get('title') or '',
            secondary_titles=tuple(secondary),
            description=node.get('synopsis') or '',
            cover_url=(node.get('main_picture') or {}).get('large') or (node.get('main_picture') or {}).get('medium'),
            status=STATUS_MAP.get(node.get('status')),
            start_year=_year(node.get('start_date')),
            end_year=_year(node.get('end_date')),
            genres=tuple(g['name'] for g in node.get('genres') or [] if g.get('name')),
            score=node.get('mean'),
            score_scale=10,
            media_format=node.get('media_type'),
            mal_id=node.get('id'),
        )

        if self.kind == ContentKind.ANIME:
            season = node.get('start_season') or {}
            duration = node.get('average_episode_duration')
            return Candidate(
                **common,
                season=season.get('season'),
                season_year=season.get('year'),
                episodes=node.get('num_episodes') or None,
                episode_duration=duration // 60 if duration else None,
                studios=tuple(s['name'] for s in node.get('studios') or [] if s.get('name')),
                content_rating=RATING_MAP.get(node.get('rating')),
            )

        return Candidate(
            **common,
            chapters=node.get('num_chapters') or None,
            volumes=node.get('num_volumes') or None,
        )
