"""
================================================================================
MediaShelf - AniList Adapter
================================================================================
GraphQL client for the AniList API.

AniList Features:
  - GraphQL = fetch exactly what we need
  - 90 requests/min rate limit
  - No authentication required

API Docs: https://anilist.gitbook.io/anilist-apiv2-docs/
================================================================================
"""

from typing import List
import logging

from .base import HttpSourceAdapter, AdapterError
from ..models import Candidate, ContentKind, AnimeStatus, MangaStatus, ContentRating

logger = logging.getLogger(__name__)


ANIME_STATUS_MAP = {
    'FINISHED': AnimeStatus.FINISHED,
    'RELEASING': AnimeStatus.AIRING,
    'NOT_YET_RELEASED': AnimeStatus.NOT_YET_AIRED,
    'CANCELLED': AnimeStatus.FINISHED,
}

MANGA_STATUS_MAP = {
    'FINISHED': MangaStatus.FINISHED,
    'RELEASING': MangaStatus.PUBLISHING,
    'HIATUS': MangaStatus.HIATUS,
    'CANCELLED': MangaStatus.CANCELLED,
    'NOT_YET_RELEASED': MangaStatus.NOT_YET_PUBLISHED,
}


class AniListAdapter(HttpSourceAdapter):
    """
    AniList GraphQL adapter.

    A single query serves both kinds; the `type` variable switches between
    ANIME and MANGA and the kind-specific fields come back null otherwise.
    """

    name = "anilist"
    priority = 2
    rate_limit = 90  # 90 requests per minute

    per_page = 10

    SEARCH_QUERY = """
    query ($search: String, $type: MediaType, $perPage: Int) {
      Page(page: 1, perPage: $perPage) {
        media(search: $search, type: $type, sort: SEARCH_MATCH) {
          id
          idMal
          title {
            romaji
            english
            native
          }
          synonyms
          description(asHtml: false)
          status
          format
          genres
          tags {
            name
            rank
          }
          averageScore
          episodes
          duration
          chapters
          volumes
          season
          seasonYear
          coverImage {
            large
          }
          startDate {
            year
          }
          endDate {
            year
          }
          studios(isMain: true) {
            nodes {
              name
            }
          }
          isAdult
        }
      }
    }
    """

    # Tags below this rank are too incidental to surface as themes
    min_tag_rank = 60

    async def search(self, text: str) -> List[Candidate]:
        """
        Search AniList.

        Args:
            text: Query variant

        Returns:
            List of Candidate objects
        """
        response = await self._request(
            "POST",
            self.settings.anilist_url,
            json={
                "query": self.SEARCH_QUERY,
                "variables": {
                    "search": text.strip(),
                    "type": self.kind.value.upper(),
                    "perPage": self.per_page,
                },
            }
        )

        if response.get('errors'):
            raise AdapterError(f"{self.name}: GraphQL errors: {response['errors']}")

        data = response.get('data') or {}
        page = data.get('Page') if isinstance(data, dict) else None
        if not isinstance(page, dict):
            raise AdapterError(f"{self.name}: response has no Page object")
        return self._parse_all(page.get('media') or [], self._parse_media)

    def _parse_media(self, media: dict) -> Candidate:
        """
        Parse an AniList media object to a Candidate.

        Args:
            media: AniList media dict from API response

        Returns:
            Candidate object
        """
        title_obj = media.get('title') or {}
        title = title_obj.get('romaji') or title_obj.get('english') or title_obj.get('native') or ''

        secondary = []
        for key in ('english', 'native', 'romaji'):
            value = title_obj.get(key)
            if value and value != title and value not in secondary:
                secondary.append(value)
        for synonym in media.get('synonyms') or []:
            if synonym and synonym not in secondary:
                secondary.append(synonym)

        themes = tuple(
            tag['name'] for tag in media.get('tags') or []
            if tag.get('name') and (tag.get('rank') or 0) >= self.min_tag_rank
        )

        studios = tuple(
            node['name'] for node in ((media.get('studios') or {}).get('nodes') or [])
            if node.get('name')
        )

        common = dict(
            source_id=self.name,
            external_id=str(media.get('id', '')),
            kind=self.kind,
            title=title,
            secondary_titles=tuple(secondary),
            description=media.get('description') or '',
            cover_url=(media.get('coverImage') or {}).get('large'),
            start_year=(media.get('startDate') or {}).get('year'),
            end_year=(media.get('endDate') or {}).get('year'),
            genres=tuple(media.get('genres') or ()),
            themes=themes,
            content_rating=ContentRating.EROTICA if media.get('isAdult') else None,
            score=media.get('averageScore'),
            score_scale=100,
            media_format=media.get('format'),
            mal_id=media.get('idMal'),
        )

        if self.kind == ContentKind.ANIME:
            return Candidate(
                **common,
                status=ANIME_STATUS_MAP.get(media.get('status')),
                season=media.get('season'),
                season_year=media.get('seasonYear'),
                episodes=media.get('episodes'),
                episode_duration=media.get('duration'),
                studios=studios,
            )

        return Candidate(
            **common,
            status=MANGA_STATUS_MAP.get(media.get('status')),
            chapters=media.get('chapters'),
            volumes=media.get('volumes'),
        )
