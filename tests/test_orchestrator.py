import asyncio

import httpx
import pytest

from conftest import FakeAdapter
from mediashelf_app.config import Settings
from mediashelf_app.lookup.adapters import JikanAdapter
from mediashelf_app.lookup.adapters.base import AdapterError, AdapterUnavailable, RateLimiter
from mediashelf_app.lookup.models import ContentKind, SearchMode
from mediashelf_app.lookup.orchestrator import FallbackSearch
from mediashelf_app.lookup.service import LookupService, search_anime


def run(coro):
    return asyncio.run(coro)


def titles(candidates):
    return [c.title for c in candidates]


def test_first_success_never_contacts_lower_priority():
    a = FakeAdapter("a", 1, {"berserk": ["Berserk", "Berserk: The Golden Age"]})
    b = FakeAdapter("b", 2, {"berserk": ["Berserk (1997)"]})

    results = run(FallbackSearch().search("Berserk", SearchMode.FIRST_SUCCESS, [a, b]))

    assert titles(results) == ["Berserk", "Berserk: The Golden Age"]
    assert b.calls == []


def test_variant_failure_is_recovered():
    a = FakeAdapter("a", 1, {
        "le prince": AdapterError("boom"),
        "prince": ["The Prince"],
    })

    results = run(FallbackSearch().search("le prince", SearchMode.FIRST_SUCCESS, [a]))

    assert titles(results) == ["The Prince"]
    assert a.calls == ["le prince", "prince"]


def test_transport_errors_are_recovered():
    a = FakeAdapter("a", 1, {"naruto": httpx.ConnectError("offline")})
    b = FakeAdapter("b", 2, {"naruto": ["Naruto"]})

    results = run(FallbackSearch().search("naruto", SearchMode.FIRST_SUCCESS, [a, b]))

    assert titles(results) == ["Naruto"]


@pytest.mark.parametrize("query", ["", "   ", "\t\n"])
def test_blank_query_short_circuits(query):
    a = FakeAdapter("a", 1, {"": ["Nothing"]})

    assert run(FallbackSearch().search(query, SearchMode.EXHAUSTIVE, [a])) == []
    assert a.calls == []


def test_adapters_are_sorted_by_priority():
    late = FakeAdapter("late", 5, {"monster": ["Monster (anime)"]})
    early = FakeAdapter("early", 1, {"monster": ["Monster"]})

    results = run(FallbackSearch().search("monster", SearchMode.FIRST_SUCCESS, [late, early]))

    assert titles(results) == ["Monster"]
    assert late.calls == []


def test_first_success_stops_variants_after_hit():
    a = FakeAdapter("a", 1, {"le septième prince": ["Le Septième Prince"]})

    run(FallbackSearch().search("le septième prince", SearchMode.FIRST_SUCCESS, [a]))

    assert a.calls == ["le septième prince"]


def test_exhaustive_queries_everything_and_dedupes():
    a = FakeAdapter("a", 1, {"le prince": ["The Prince"], "prince": ["The Prince", "Prince of Tennis"]})
    b = FakeAdapter("b", 2, {"le prince": ["the prince!"], "prince": ["Little Prince"]})

    results = run(FallbackSearch().search("le prince", SearchMode.EXHAUSTIVE, [a, b]))

    assert titles(results) == ["The Prince", "Prince of Tennis", "Little Prince"]
    assert results[0].source_id == "a"
    assert a.calls == ["le prince", "prince"]
    assert b.calls == ["le prince", "prince"]


def test_empty_adapter_falls_through():
    a = FakeAdapter("a", 1)
    b = FakeAdapter("b", 2, {"pluto": ["Pluto"]})

    results = run(FallbackSearch().search("pluto", SearchMode.FIRST_SUCCESS, [a, b]))

    assert titles(results) == ["Pluto"]
    assert a.calls == ["pluto"]


def test_unavailable_adapter_is_skipped():
    a = FakeAdapter("a", 1, {"pluto": ["Pluto"]}, available=False)
    b = FakeAdapter("b", 2, {"pluto": ["Pluto (2023)"]})

    results = run(FallbackSearch().search("pluto", SearchMode.FIRST_SUCCESS, [a, b]))

    assert titles(results) == ["Pluto (2023)"]
    assert a.calls == []


def test_adapter_unavailable_mid_search_stops_that_adapter():
    a = FakeAdapter("a", 1, {"le roi": AdapterUnavailable("no key")})
    b = FakeAdapter("b", 2, {"roi": ["Roi"]})

    results = run(FallbackSearch().search("le roi", SearchMode.FIRST_SUCCESS, [a, b]))

    assert titles(results) == ["Roi"]
    assert a.calls == ["le roi"]


def test_nothing_found_returns_empty_list():
    a = FakeAdapter("a", 1, {"x": AdapterError("down")})

    assert run(FallbackSearch().search("x", SearchMode.EXHAUSTIVE, [a])) == []


def test_contract_violations_propagate():
    with pytest.raises(TypeError):
        run(FallbackSearch().search(None, SearchMode.FIRST_SUCCESS, []))
    with pytest.raises(TypeError):
        run(FallbackSearch().search("berserk", SearchMode.FIRST_SUCCESS, [object()]))
    with pytest.raises(ValueError):
        run(FallbackSearch().search("berserk", "sometimes", []))


def test_unexpected_adapter_exceptions_propagate():
    a = FakeAdapter("a", 1, {"bug": KeyError("title")})

    with pytest.raises(KeyError):
        run(FallbackSearch().search("bug", SearchMode.FIRST_SUCCESS, [a]))


def test_lookup_service_maps_try_all_sources():
    a = FakeAdapter("a", 1, {"akira": ["Akira"]}, kind=ContentKind.MANGA)
    b = FakeAdapter("b", 2, {"akira": ["Akira (1988)"]}, kind=ContentKind.MANGA)
    service = LookupService(adapters={ContentKind.MANGA: [a, b]})

    first = run(service.search_manga("akira"))
    everything = run(service.search_manga("akira", try_all_sources=True))

    assert titles(first) == ["Akira"]
    assert titles(everything) == ["Akira", "Akira (1988)"]
    assert run(service.search_anime("akira")) == []


def test_describe_sources_reports_availability():
    a = FakeAdapter("a", 2)
    b = FakeAdapter("b", 1, available=False)
    service = LookupService(adapters={ContentKind.ANIME: [a, b]})

    assert service.describe_sources(ContentKind.ANIME) == [
        {"name": "b", "priority": 1, "available": False},
        {"name": "a", "priority": 2, "available": True},
    ]


def test_module_search_anime_with_adapters():
    a = FakeAdapter("a", 1, {"mushishi": ["Mushishi"]})

    results = run(search_anime("Mushishi", adapters=[a]))

    assert titles(results) == ["Mushishi"]


def test_malformed_catalog_payload_falls_through_to_next_adapter():
    def handler(request):
        return httpx.Response(200, json={"data": "maintenance"})

    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            jikan = JikanAdapter(ContentKind.ANIME, settings=Settings(max_retries=1), client=client)
            jikan.rate_limiter = RateLimiter(60000)
            backup = FakeAdapter("backup", 9, {"naruto": ["Naruto"]})
            return await FallbackSearch().search("naruto", SearchMode.FIRST_SUCCESS, [jikan, backup])

    assert titles(run(_run())) == ["Naruto"]
