"""
================================================================================
MediaShelf - Fallback Search Orchestrator
================================================================================
Drives catalog adapters in priority order across query variants.

Flow:
  1. Expand the query into variants (article-stripped, translated)
  2. For each adapter, lowest priority number first:
       - try each variant in order, one request at a time
       - a failed variant is logged and skipped
       - FIRST_SUCCESS: stop variants after the first hit
  3. Dedupe each adapter's haul, append to the running list
  4. FIRST_SUCCESS: stop once an adapter produced anything
  5. Dedupe everything and return

Requests are strictly sequential. The catalogs are free-tier and rate
limited, and "has a higher-priority source already answered?" must be
decided before the next source is contacted.
================================================================================
"""

import logging
import time
from typing import Iterable, List, Optional, Sequence

import httpx

from .adapters.base import SourceAdapter, AdapterError, AdapterUnavailable
from .deduplicator import dedupe
from .models import Candidate, QueryVariant, SearchMode
from .query_expander import QueryExpander
from ..log import debug_log_event

logger = logging.getLogger(__name__)

# Per-attempt failures that are recovered locally
ATTEMPT_ERRORS = (AdapterError, httpx.HTTPError)


class FallbackSearch:
    """
    Sequential multi-catalog search with a stop policy.

    Holds no per-search state, so one instance can serve any number of
    independent searches.
    """

    def __init__(self, expander: Optional[QueryExpander] = None):
        self.expander = expander or QueryExpander()

    async def search(
        self,
        query: str,
        mode: SearchMode,
        adapters: Iterable[SourceAdapter]
    ) -> List[Candidate]:
        """
        Search the given adapters for a query.

        Args:
            query: Free-text title
            mode: FIRST_SUCCESS or EXHAUSTIVE
            adapters: Adapters to consult (sorted by priority here)

        Returns:
            Deduplicated candidates, possibly empty

        Raises:
            TypeError: query is not a string, or an adapter is not a SourceAdapter
        """
        if not isinstance(query, str):
            raise TypeError(f"query must be str, not {type(query).__name__}")
        mode = SearchMode(mode)
        ordered = self._order(adapters)

        if not query.strip():
            return []

        start_time = time.time()
        variants = self.expander.expand(query)
        logger.info(f"Lookup '{query}' ({mode.value}): variants {[v.text for v in variants]}")

        results: List[Candidate] = []
        tried: List[str] = []

        for adapter in ordered:
            if not adapter.is_available:
                logger.info(f"Skipping {adapter.name}: not configured")
                continue

            tried.append(adapter.name)
            adapter_results = await self._search_adapter(adapter, variants, mode)

            if adapter_results:
                unique = dedupe(adapter_results)
                results.extend(unique)
                logger.info(f"{adapter.name}: {len(unique)} unique result(s)")

                if mode == SearchMode.FIRST_SUCCESS:
                    break
            else:
                logger.info(f"{adapter.name}: no results")

        final = dedupe(results)
        elapsed = time.time() - start_time
        logger.info(f"Lookup '{query}' finished: {len(final)} result(s) in {elapsed:.2f}s")

        debug_log_event({
            'event': 'lookup_search',
            'query': query,
            'mode': mode.value,
            'variants': [v.text for v in variants],
            'adapters': tried,
            'results': len(final),
            'duration_ms': int(elapsed * 1000),
        })
        return final

    async def _search_adapter(
        self,
        adapter: SourceAdapter,
        variants: Sequence[QueryVariant],
        mode: SearchMode
    ) -> List[Candidate]:
        """Run one adapter over the variants; failures never escape."""
        found: List[Candidate] = []

        for variant in variants:
            try:
                batch = await adapter.search(variant.text)
            except AdapterUnavailable as e:
                logger.warning(f"{adapter.name} unavailable: {e}")
                break
            except ATTEMPT_ERRORS as e:
                logger.warning(f"⚠️ {adapter.name} failed for '{variant.text}': {e}")
                continue

            if batch:
                found.extend(batch)
                logger.info(f"✅ {adapter.name}: {len(batch)} result(s) for '{variant.text}'")
                if mode == SearchMode.FIRST_SUCCESS:
                    break

        return found

    @staticmethod
    def _order(adapters: Iterable[SourceAdapter]) -> List[SourceAdapter]:
        adapters = list(adapters)
        for adapter in adapters:
            if not isinstance(adapter, SourceAdapter):
                raise TypeError(f"expected SourceAdapter, got {type(adapter).__name__}")
        return sorted(adapters, key=lambda a: a.priority)
