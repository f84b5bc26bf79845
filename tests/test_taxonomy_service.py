import pytest

from conftest import make_candidate
from mediashelf_app import database
from mediashelf_app.lookup.models import AnimeStatus, ContentKind
from mediashelf_app.models import CatalogEntry
from mediashelf_app.services.taxonomy_service import (
    add_candidate, get_all_genres, get_all_themes, normalize_entry_taxonomy
)
from mediashelf_app.taxonomy import GENRES, THEMES, ExclusionSet, TaxonomyConfig

CONFIG = TaxonomyConfig(
    genres=GENRES,
    themes=THEMES,
    exclusions=ExclusionSet.from_terms(["Raijin Scans"]),
)


@pytest.fixture
def session(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    database.reset_engine()
    database.init_database()
    with database.get_db_session() as session:
        yield session
    database.reset_engine()


def add_entry(session, kind, title, genres=None, themes=None):
    session.add(CatalogEntry(kind=kind, title=title, genres=genres, themes=themes))
    session.flush()


def test_get_all_genres_collapses_spellings(session):
    add_entry(session, "manga", "Berserk", genres="Action, Shounen, Drama")
    add_entry(session, "anime", "Naruto", genres="Shōnen, Action, Raijin Scans")
    add_entry(session, "anime", "Mushishi", genres=None)
    add_entry(session, "manga", "Dandadan", genres="Shonen,Comédie, Comedy")

    assert get_all_genres(session, config=CONFIG) == ["Action", "Comédie", "Drama", "Shounen"]


def test_get_all_genres_filters_by_kind(session):
    add_entry(session, "manga", "Berserk", genres="Seinen, Drama")
    add_entry(session, "anime", "Naruto", genres="Shounen")

    assert get_all_genres(session, kind="anime", config=CONFIG) == ["Shounen"]
    assert get_all_genres(session, kind="manga", config=CONFIG) == ["Drama", "Seinen"]


def test_get_all_themes(session):
    add_entry(session, "anime", "Baki", themes="Martial Arts, Arts martiaux")
    add_entry(session, "anime", "Hajime no Ippo", themes="Combat Sports")

    assert get_all_themes(session, config=CONFIG) == ["Combat Sports", "Martial Arts"]


def test_empty_collection_has_no_genres(session):
    assert get_all_genres(session, config=CONFIG) == []


def test_normalize_entry_taxonomy_rewrites_fields():
    entry = CatalogEntry(kind="anime", title="x", genres="Shounen, Shonen, Raijin Scans", themes="")

    normalize_entry_taxonomy(entry, CONFIG)

    assert entry.genres == "Shounen"
    assert entry.themes is None


def test_add_candidate_stores_normalized_taxonomy(session):
    candidate = make_candidate(
        "Frieren",
        source_id="anilist",
        external_id="154587",
        kind=ContentKind.ANIME,
        genres=("Adventure", "Aventure", "Drama"),
        themes=("Raijin Scans",),
        status=AnimeStatus.FINISHED,
        mal_id=52991,
    )

    entry = add_candidate(session, candidate, CONFIG)

    stored = session.get(CatalogEntry, entry.id)
    assert stored.kind == "anime"
    assert stored.genres == "Adventure, Drama"
    assert stored.themes is None
    assert stored.status == "finished"
    assert stored.anilist_id == 154587
    assert stored.mal_id == 52991


def test_add_candidate_from_jikan_sets_mal_id(session):
    candidate = make_candidate("Berserk", source_id="jikan", external_id="2", kind=ContentKind.MANGA)

    entry = add_candidate(session, candidate, CONFIG)

    assert entry.mal_id == 2
    assert entry.anilist_id is None
    assert entry.genres is None
