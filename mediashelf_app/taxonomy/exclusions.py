"""
================================================================================
MediaShelf - Taxonomy Exclusion Set
================================================================================
Terms that must never surface as a genre or theme.

Some catalogs (fan sites, scanlation aggregators) file the translating
team's name under "genres". Those names come from two places:

  1. A curated text file (EXCLUSION_LIST_PATH), one term per line:

        # comments and blank lines are ignored
        [Teams already present]
        - Anteiku Scan
        - Astral Scan

        [Teams to add]
        Raijin Scans

     Only sections named in EXCLUSION_SECTIONS contribute. "===" rules
     are decoration. Lines of 100+ characters are prose, not names.

  2. FALLBACK_EXCLUDED_TERMS, always merged in, so a missing or broken
     file still leaves a working filter.
================================================================================
"""

import logging
import unicodedata
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional

logger = logging.getLogger(__name__)

EXCLUSION_SECTIONS = frozenset({
    'teams already present',
    'teams to add',
})

MAX_TERM_LENGTH = 100

FALLBACK_EXCLUDED_TERMS = (
    'Anteiku Scan', 'Astral Scan', 'Flamescans', 'Flamesscans', 'GoFast',
    'Little Garden', 'Moon Scans', 'Manga Corporation', 'OriTrad',
    'Osiris Scans', 'Pearlscan', 'Phénix scans', 'Raijin Scans',
    'Reaper Scans', 'Rimu Scans', 'Ryozanpaku Scantrad', 'Scantrad Union',
    'Secret du roi', 'Starbound Scans', 'Tappytoon', 'Team Clachoufoufou',
    'BAKA-Ecchi', 'Manga hentai', 'Manga romance', 'Little Breasts',
    'Slave', 'Perf', 'Japonais',
)


def normalize_name(name: str) -> str:
    """
    Case-, accent- and spacing-insensitive form of a term.

    Examples:
        "Phénix  Scans" -> "phenix scans"
        "BAKA-Ecchi" -> "baka-ecchi"
    """
    if not name or not isinstance(name, str):
        return ''
    collapsed = ' '.join(name.lower().split())
    decomposed = unicodedata.normalize('NFD', collapsed)
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


@dataclass(frozen=True)
class ExclusionSet:
    """Read-only set of excluded terms plus their normalized forms."""

    terms: FrozenSet[str] = frozenset()
    normalized: FrozenSet[str] = frozenset()

    @classmethod
    def from_terms(cls, terms: Iterable[str]) -> "ExclusionSet":
        cleaned = [t.strip() for t in terms if t and t.strip()]
        return cls(
            terms=frozenset(cleaned),
            normalized=frozenset(normalize_name(t) for t in cleaned),
        )

    def matches(self, term: Optional[str]) -> bool:
        """True if `term` is excluded, verbatim or case/accent-insensitively."""
        if not term or not isinstance(term, str):
            return False
        stripped = term.strip()
        return stripped in self.terms or normalize_name(stripped) in self.normalized

    def union(self, other: "ExclusionSet") -> "ExclusionSet":
        return ExclusionSet(self.terms | other.terms, self.normalized | other.normalized)

    def __contains__(self, term: str) -> bool:
        return self.matches(term)

    def __len__(self) -> int:
        return len(self.terms)


def parse_exclusion_list(text: str, sections: FrozenSet[str] = EXCLUSION_SECTIONS) -> List[str]:
    """
    Extract excluded terms from the curated list format.

    Args:
        text: File contents
        sections: Lower-cased section names that contribute terms

    Returns:
        Terms in file order (duplicates kept)
    """
    terms = []
    in_section = False

    for line in text.splitlines():
        stripped = line.strip()

        if not stripped or stripped.startswith('#') or stripped.startswith('==='):
            continue

        if stripped.startswith('[') and stripped.endswith(']'):
            in_section = stripped[1:-1].strip().lower() in sections
            continue

        if not in_section:
            continue

        if stripped.startswith('- '):
            stripped = stripped[2:].strip()

        if stripped and len(stripped) < MAX_TERM_LENGTH:
            terms.append(stripped)

    return terms


def load_exclusion_set(path: Optional[str] = None) -> ExclusionSet:
    """
    Build the exclusion set from the curated file and the fallback list.

    A missing or unreadable file is logged and the fallback list alone is
    used.

    Args:
        path: Curated list location (None = fallback list only)

    Returns:
        ExclusionSet
    """
    fallback = ExclusionSet.from_terms(FALLBACK_EXCLUDED_TERMS)
    if not path:
        return fallback

    try:
        with open(path, 'r', encoding='utf-8') as f:
            curated = parse_exclusion_list(f.read())
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"⚠️ Could not load exclusion list {path}: {e}")
        return fallback

    logger.info(f"Loaded {len(curated)} excluded terms from {path}")
    return ExclusionSet.from_terms(curated).union(fallback)
