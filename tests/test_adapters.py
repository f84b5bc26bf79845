import asyncio
import dataclasses
import json

import httpx
import pytest

from mediashelf_app.config import Settings
from mediashelf_app.lookup.adapters import AniListAdapter, JikanAdapter, MyAnimeListAdapter
from mediashelf_app.lookup.adapters.base import AdapterError, AdapterUnavailable, RateLimiter
from mediashelf_app.lookup.adapters.jikan import convert_mal_rating
from mediashelf_app.lookup.models import (
    AnimeStatus, ContentKind, ContentRating, MangaStatus
)
from mediashelf_app.lookup.service import build_adapters

SETTINGS = Settings(
    jikan_base_url="https://jikan.test/v4",
    anilist_url="https://anilist.test/graphql",
    mal_api_url="https://mal.test/v2",
    max_retries=1,
)


def search_with(adapter_cls, kind, handler, text, settings=SETTINGS):
    """Run adapter.search(text) against a mocked transport; return (results, requests)."""
    seen = []

    def recording_handler(request):
        seen.append(request)
        return handler(request)

    async def _run():
        transport = httpx.MockTransport(recording_handler)
        async with httpx.AsyncClient(transport=transport) as client:
            adapter = adapter_cls(kind, settings=settings, client=client)
            adapter.rate_limiter = RateLimiter(60000)
            return await adapter.search(text)

    return asyncio.run(_run()), seen


JIKAN_ANIME = {
    "mal_id": 21,
    "title": "One Piece",
    "title_english": "One Piece",
    "title_japanese": "ワンピース",
    "title_synonyms": ["OP"],
    "synopsis": "Pirates.",
    "images": {"jpg": {"image_url": "small.jpg", "large_image_url": "large.jpg"}},
    "type": "TV",
    "status": "Currently Airing",
    "aired": {"from": "1999-10-20T00:00:00+00:00", "to": None,
              "prop": {"from": {"year": 1999}, "to": {"year": None}}},
    "episodes": None,
    "duration": "24 min per ep",
    "rating": "PG-13 - Teens 13 or older",
    "score": 8.7,
    "season": "fall",
    "year": 1999,
    "studios": [{"name": "Toei Animation"}],
    "genres": [{"name": "Action"}, {"name": "Adventure"}],
    "themes": [],
}


def test_jikan_numeric_query_uses_mal_id():
    def handler(request):
        assert request.url.path == "/v4/anime/21"
        return httpx.Response(200, json={"data": JIKAN_ANIME})

    results, requests = search_with(JikanAdapter, ContentKind.ANIME, handler, "21")

    assert len(requests) == 1
    [one_piece] = results
    assert one_piece.source_id == "jikan"
    assert one_piece.external_id == "21"
    assert one_piece.title == "One Piece"
    assert one_piece.secondary_titles == ("One Piece", "ワンピース", "OP")
    assert one_piece.status == AnimeStatus.AIRING
    assert one_piece.start_year == 1999
    assert one_piece.end_year is None
    assert one_piece.episode_duration == 24
    assert one_piece.genres == ("Action", "Adventure")
    assert one_piece.studios == ("Toei Animation",)
    assert one_piece.content_rating == ContentRating.SAFE
    assert one_piece.cover_url == "large.jpg"


def test_jikan_unknown_id_falls_back_to_text_search():
    def handler(request):
        if request.url.path == "/v4/anime/86":
            return httpx.Response(404, json={"status": 404})
        assert request.url.params["q"] == "86"
        return httpx.Response(200, json={"data": [dict(JIKAN_ANIME, mal_id=41457, title="86")]})

    results, requests = search_with(JikanAdapter, ContentKind.ANIME, handler, "86")

    assert [r.title for r in results] == ["86"]
    assert [r.url.path for r in requests] == ["/v4/anime/86", "/v4/anime"]


def test_jikan_manga_search():
    manga = {
        "mal_id": 2,
        "title": "Berserk",
        "status": "On Hiatus",
        "type": "Manga",
        "chapters": None,
        "volumes": 42,
        "published": {"from": "1989-08-25T00:00:00+00:00", "to": None},
        "genres": [{"name": "Action"}],
        "themes": [{"name": "Gore"}],
        "demographics": [{"name": "Seinen"}],
    }

    def handler(request):
        assert request.url.path == "/v4/manga"
        assert request.url.params["q"] == "berserk"
        return httpx.Response(200, json={"data": [manga]})

    [berserk], _ = search_with(JikanAdapter, ContentKind.MANGA, handler, "berserk")

    assert berserk.kind == ContentKind.MANGA
    assert berserk.status == MangaStatus.HIATUS
    assert berserk.start_year == 1989
    assert berserk.themes == ("Gore",)
    assert berserk.demographic == "Seinen"
    assert berserk.volumes == 42


def test_jikan_empty_data_is_no_results():
    results, _ = search_with(
        JikanAdapter, ContentKind.ANIME,
        lambda request: httpx.Response(200, json={"data": []}),
        "zzzz"
    )
    assert results == []


def test_jikan_server_error_raises():
    with pytest.raises(httpx.HTTPStatusError):
        search_with(
            JikanAdapter, ContentKind.ANIME,
            lambda request: httpx.Response(503),
            "naruto"
        )


def test_invalid_json_is_adapter_error():
    with pytest.raises(AdapterError):
        search_with(
            JikanAdapter, ContentKind.ANIME,
            lambda request: httpx.Response(200, content=b"<html>maintenance</html>"),
            "naruto"
        )


@pytest.mark.parametrize("adapter_cls, body", [
    (JikanAdapter, {"data": "maintenance"}),
    (JikanAdapter, {"data": [None]}),
    (JikanAdapter, [{"mal_id": 1}]),
    (AniListAdapter, {"data": {"Page": {"media": [None]}}}),
    (AniListAdapter, {"data": {"Page": "down"}}),
    (MyAnimeListAdapter, {"data": [{"title": "no node"}]}),
])
def test_malformed_payload_is_adapter_error(adapter_cls, body):
    settings = dataclasses.replace(SETTINGS, mal_client_id="client-123")
    with pytest.raises(AdapterError):
        search_with(
            adapter_cls, ContentKind.ANIME,
            lambda request: httpx.Response(200, json=body),
            "naruto", settings=settings
        )


def test_jikan_non_json_id_lookup_falls_back_to_text_search():
    def handler(request):
        if request.url.path == "/v4/anime/21":
            return httpx.Response(200, content=b"<html>maintenance</html>")
        assert request.url.params["q"] == "21"
        return httpx.Response(200, json={"data": [JIKAN_ANIME]})

    results, requests = search_with(JikanAdapter, ContentKind.ANIME, handler, "21")

    assert [r.title for r in results] == ["One Piece"]
    assert [r.url.path for r in requests] == ["/v4/anime/21", "/v4/anime"]


@pytest.mark.parametrize("rating, expected", [
    ("Rx - Hentai", ContentRating.EROTICA),
    ("R+ - Mild Nudity", ContentRating.EROTICA),
    ("R - 17+ (violence & profanity)", ContentRating.SUGGESTIVE),
    ("PG-13 - Teens 13 or older", ContentRating.SAFE),
    (None, None),
])
def test_convert_mal_rating(rating, expected):
    assert convert_mal_rating(rating) == expected


def test_anilist_sends_graphql_and_parses_media():
    media = {
        "id": 101922,
        "idMal": 38000,
        "title": {"romaji": "Kimetsu no Yaiba", "english": "Demon Slayer", "native": "鬼滅の刃"},
        "synonyms": ["KnY"],
        "status": "FINISHED",
        "format": "TV",
        "genres": ["Action", "Supernatural"],
        "tags": [{"name": "Demons", "rank": 94}, {"name": "Trains", "rank": 20}],
        "averageScore": 84,
        "episodes": 26,
        "duration": 24,
        "season": "SPRING",
        "seasonYear": 2019,
        "coverImage": {"large": "cover.png"},
        "startDate": {"year": 2019},
        "endDate": {"year": 2019},
        "studios": {"nodes": [{"name": "ufotable"}]},
        "isAdult": False,
    }

    def handler(request):
        body = json.loads(request.content)
        assert request.method == "POST"
        assert body["variables"]["search"] == "demon slayer"
        assert body["variables"]["type"] == "ANIME"
        return httpx.Response(200, json={"data": {"Page": {"media": [media]}}})

    [show], _ = search_with(AniListAdapter, ContentKind.ANIME, handler, "demon slayer")

    assert show.source_id == "anilist"
    assert show.external_id == "101922"
    assert show.title == "Kimetsu no Yaiba"
    assert show.secondary_titles == ("Demon Slayer", "鬼滅の刃", "KnY")
    assert show.themes == ("Demons",)
    assert show.status == AnimeStatus.FINISHED
    assert show.score_scale == 100
    assert show.mal_id == 38000
    assert show.studios == ("ufotable",)
    assert show.content_rating is None


def test_anilist_graphql_errors_raise():
    def handler(request):
        return httpx.Response(200, json={"errors": [{"message": "bad"}], "data": None})

    with pytest.raises(AdapterError):
        search_with(AniListAdapter, ContentKind.MANGA, handler, "berserk")


def test_myanimelist_without_client_id_is_unavailable():
    adapter = MyAnimeListAdapter(ContentKind.ANIME, settings=SETTINGS)

    assert adapter.is_available is False
    with pytest.raises(AdapterUnavailable):
        asyncio.run(adapter.search("berserk"))


def test_myanimelist_sends_client_id():
    settings = Settings(mal_api_url="https://mal.test/v2", mal_client_id="abc123", max_retries=1)
    node = {
        "id": 5114,
        "title": "Fullmetal Alchemist: Brotherhood",
        "alternative_titles": {"en": "Fullmetal Alchemist: Brotherhood", "ja": "鋼の錬金術師", "synonyms": ["FMA:B"]},
        "status": "finished_airing",
        "start_date": "2009-04-05",
        "end_date": "2010-07-04",
        "genres": [{"id": 1, "name": "Action"}],
        "num_episodes": 64,
        "average_episode_duration": 1440,
        "rating": "r",
    }

    def handler(request):
        assert request.headers["X-MAL-CLIENT-ID"] == "abc123"
        assert request.url.path == "/v2/anime"
        return httpx.Response(200, json={"data": [{"node": node}]})

    [fma], _ = search_with(MyAnimeListAdapter, ContentKind.ANIME, handler, "fullmetal", settings=settings)

    assert fma.mal_id == 5114
    assert fma.status == AnimeStatus.FINISHED
    assert (fma.start_year, fma.end_year) == (2009, 2010)
    assert fma.episode_duration == 24
    assert fma.content_rating == ContentRating.SUGGESTIVE


def test_myanimelist_short_query_returns_nothing():
    settings = Settings(mal_client_id="abc123", max_retries=1)

    def handler(request):
        raise AssertionError("no request expected")

    results, requests = search_with(MyAnimeListAdapter, ContentKind.MANGA, handler, "ab", settings=settings)

    assert results == [] and requests == []


def test_build_adapters_respects_enabled_sources():
    settings = Settings(enabled_sources=("anilist", "jikan"))

    adapters = build_adapters(ContentKind.ANIME, settings)

    assert [a.name for a in adapters] == ["jikan", "anilist"]
    assert all(a.kind == ContentKind.ANIME for a in adapters)
