"""
================================================================================
MediaShelf - Lookup Service
================================================================================
Entry points the storage and UI layers call to look up a title.

Usage:
    async with LookupService(Settings.from_env()) as lookup:
        results = await lookup.search_anime("le septième prince")
        everything = await lookup.search_manga("berserk", try_all_sources=True)

One-shot helpers (search_anime / search_manga) build a service, run one
search and close the HTTP clients again.
================================================================================
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..config import Settings
from .adapters import ADAPTER_CLASSES, SourceAdapter
from .models import Candidate, ContentKind, SearchMode
from .orchestrator import FallbackSearch

logger = logging.getLogger(__name__)


def build_adapters(kind: ContentKind, settings: Settings) -> List[SourceAdapter]:
    """
    Instantiate the enabled adapters for one content kind.

    Args:
        kind: ANIME or MANGA
        settings: Lookup settings (LOOKUP_ENABLED_SOURCES filters here)

    Returns:
        Adapters sorted by priority
    """
    adapters = [
        adapter_cls(kind, settings=settings)
        for adapter_cls in ADAPTER_CLASSES
        if settings.source_enabled(adapter_cls.name)
    ]
    return sorted(adapters, key=lambda a: a.priority)


class LookupService:
    """
    Holds the per-kind adapter lists and the orchestrator.

    Handles:
      - Adapter construction from settings
      - Mapping try_all_sources onto a SearchMode
      - Closing adapter HTTP clients
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        adapters: Optional[Dict[ContentKind, Sequence[SourceAdapter]]] = None,
        orchestrator: Optional[FallbackSearch] = None
    ):
        self.settings = settings or Settings()
        if adapters is None:
            adapters = {kind: build_adapters(kind, self.settings) for kind in ContentKind}
        self.adapters: Dict[ContentKind, List[SourceAdapter]] = {
            kind: list(adapters.get(kind, ())) for kind in ContentKind
        }
        self.orchestrator = orchestrator or FallbackSearch()

    async def __aenter__(self) -> "LookupService":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        """Close all adapter HTTP clients."""
        for adapters in self.adapters.values():
            for adapter in adapters:
                await adapter.close()

    async def search(
        self,
        kind: ContentKind,
        query: str,
        try_all_sources: bool = False
    ) -> List[Candidate]:
        """
        Look up a title in every catalog configured for `kind`.

        Args:
            kind: ANIME or MANGA
            query: Free-text title
            try_all_sources: False = stop at the first catalog with results

        Returns:
            Deduplicated candidates (empty list when nothing matched)
        """
        mode = SearchMode.from_try_all_sources(try_all_sources)
        return await self.orchestrator.search(query, mode, self.adapters[ContentKind(kind)])

    async def search_anime(self, query: str, try_all_sources: bool = False) -> List[Candidate]:
        return await self.search(ContentKind.ANIME, query, try_all_sources)

    async def search_manga(self, query: str, try_all_sources: bool = False) -> List[Candidate]:
        return await self.search(ContentKind.MANGA, query, try_all_sources)

    def describe_sources(self, kind: ContentKind) -> List[Dict]:
        """Adapter summary for the sources endpoint."""
        return [
            {
                'name': adapter.name,
                'priority': adapter.priority,
                'available': adapter.is_available,
            }
            for adapter in sorted(self.adapters[ContentKind(kind)], key=lambda a: a.priority)
        ]


async def search_anime(
    query: str,
    try_all_sources: bool = False,
    adapters: Optional[Sequence[SourceAdapter]] = None,
    settings: Optional[Settings] = None
) -> List[Candidate]:
    """Search anime catalogs with a throwaway LookupService."""
    overrides = {ContentKind.ANIME: adapters} if adapters is not None else None
    async with LookupService(settings or Settings.from_env(), adapters=overrides) as lookup:
        return await lookup.search_anime(query, try_all_sources)


async def search_manga(
    query: str,
    try_all_sources: bool = False,
    adapters: Optional[Sequence[SourceAdapter]] = None,
    settings: Optional[Settings] = None
) -> List[Candidate]:
    """Search manga catalogs with a throwaway LookupService."""
    overrides = {ContentKind.MANGA: adapters} if adapters is not None else None
    async with LookupService(settings or Settings.from_env(), adapters=overrides) as lookup:
        return await lookup.search_manga(query, try_all_sources)
