"""
================================================================================
MediaShelf - Vocabulary Canonicalizer
================================================================================
Collapses genre/theme labels that name the same concept.

Problem:
  Records from different catalogs carry "Shounen", "Shonen" and "Shōnen",
  or "Martial Arts" next to "Arts martiaux", plus the odd scanlation team
  name filed as a genre.

Solution:
  1. Drop excluded terms (raw form)
  2. Canonicalize through the dictionary
  3. Drop terms whose canonical form is excluded
  4. Group on the canonical form (lower-cased, spaces collapsed)
  5. Keep the first raw label of each group, not the canonical spelling

Two shapes:
  - aggregate(): many raw terms -> sorted unique representatives
  - deduplicate_delimited(): one "A, B, C" field -> "A, C"
================================================================================
"""

import logging
import re
from typing import Iterable, List, Optional, Set

from .dictionaries import CanonicalDictionary
from .exclusions import ExclusionSet, normalize_name

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = ','
JOINER = ', '

# " - " separated lists (some French catalogs)
_DASH_SEPARATOR = re.compile(r'\s*-\s*')
_WHITESPACE = re.compile(r'\s+')


def grouping_key(canonical: str) -> str:
    """Lower-cased, whitespace-collapsed canonical term."""
    return _WHITESPACE.sub(' ', canonical.lower()).strip()


def split_terms(items: Optional[str], delimiter: str = DEFAULT_DELIMITER) -> List[str]:
    """Split a delimited field into trimmed, non-empty terms."""
    if not items or not isinstance(items, str):
        return []
    return [part.strip() for part in items.split(delimiter) if part.strip()]


class VocabularyCanonicalizer:
    """
    Canonicalizer bound to one dictionary and one exclusion set.

    Both are immutable, so an instance can be shared freely.
    """

    def __init__(self, dictionary: CanonicalDictionary, exclusions: Optional[ExclusionSet] = None):
        self.dictionary = dictionary
        self.exclusions = exclusions if exclusions is not None else ExclusionSet()

    def canonicalize(self, term: str) -> str:
        """Canonical form of one term (passthrough when unknown)."""
        return self.dictionary.canonicalize(term)

    def is_excluded(self, term: str) -> bool:
        return self.exclusions.matches(term)

    def _representatives(self, terms: Iterable[str]) -> List[str]:
        """First raw term of each canonical group, in input order."""
        seen_keys: Set[str] = set()
        kept: List[str] = []

        for raw in terms:
            term = raw.strip() if isinstance(raw, str) else ''
            if not term:
                continue

            if self.exclusions.matches(term):
                logger.debug(f"Excluded {self.dictionary.name} term '{term}'")
                continue

            canonical = self.canonicalize(term)
            if self.exclusions.matches(canonical):
                logger.debug(f"Excluded {self.dictionary.name} term '{term}' (canonical '{canonical}')")
                continue

            key = grouping_key(canonical)
            if key in seen_keys:
                continue
            seen_keys.add(key)
            kept.append(term)

        return kept

    def aggregate(self, raw_terms: Iterable[str]) -> List[str]:
        """
        Reduce a harvest of raw terms to one label per concept.

        Args:
            raw_terms: Terms in harvest order (duplicates allowed)

        Returns:
            Representative raw terms, sorted case- and accent-insensitively
        """
        distinct = []
        seen_raw: Set[str] = set()
        for raw in raw_terms:
            if isinstance(raw, str) and raw.strip() and raw.strip() not in seen_raw:
                seen_raw.add(raw.strip())
                distinct.append(raw.strip())

        kept = self._representatives(distinct)
        return sorted(kept, key=lambda t: (normalize_name(t), t))

    def deduplicate_delimited(
        self,
        items: Optional[str],
        delimiter: str = DEFAULT_DELIMITER
    ) -> Optional[str]:
        """
        Deduplicate one record's delimited taxonomy field.

        Args:
            items: e.g. "Shounen, Action, Shōnen, Raijin Scans"
            delimiter: Split character (output always uses ", ")

        Returns:
            e.g. "Shounen, Action", or None if nothing survives
        """
        kept = self._representatives(split_terms(items, delimiter))
        return JOINER.join(kept) if kept else None


# =============================================================================
# MODULE HELPERS
# =============================================================================

def _resolve_exclusions(exclusions: Optional[ExclusionSet]) -> ExclusionSet:
    if exclusions is not None:
        return exclusions
    from . import get_taxonomy_config
    return get_taxonomy_config().exclusions


def deduplicate_using_translations(
    items: Optional[str],
    dictionary: CanonicalDictionary,
    exclusions: Optional[ExclusionSet] = None
) -> Optional[str]:
    """
    Deduplicate a comma-joined taxonomy field through a dictionary.

    Args:
        items: Comma-joined raw terms
        dictionary: GENRES or THEMES
        exclusions: Defaults to the process-wide exclusion set

    Returns:
        Comma-joined survivors or None
    """
    canonicalizer = VocabularyCanonicalizer(dictionary, _resolve_exclusions(exclusions))
    return canonicalizer.deduplicate_delimited(items)


def deduplicate_delimited_items(
    items: Optional[str],
    dictionary: Optional[CanonicalDictionary] = None
) -> Optional[str]:
    """
    Deduplicate a comma-joined field.

    With a dictionary this is deduplicate_using_translations; without one,
    terms are compared on their lower-cased, whitespace-collapsed text and
    the first spelling is kept.
    """
    if dictionary is not None:
        return deduplicate_using_translations(items, dictionary)

    seen: Set[str] = set()
    kept: List[str] = []
    for term in split_terms(items):
        key = grouping_key(term)
        if key not in seen:
            seen.add(key)
            kept.append(term)
    return JOINER.join(kept) if kept else None


def normalize_dash_separated(items: Optional[str], dictionary: CanonicalDictionary) -> Optional[str]:
    """
    Normalize a " - " separated field to ", " and deduplicate it.

    Example:
        "Action - Aventure - Adventure" -> "Action, Aventure"
    """
    if not items or not isinstance(items, str) or not items.strip():
        return None
    return deduplicate_using_translations(_DASH_SEPARATOR.sub(', ', items.strip()), dictionary)


def is_excluded(term: str, exclusions: Optional[ExclusionSet] = None) -> bool:
    """True if `term` belongs to the exclusion set."""
    return _resolve_exclusions(exclusions).matches(term)
