"""
================================================================================
MediaShelf - Candidate Deduplicator
================================================================================
Collapses candidates that share a normalized title.

Problem:
  "Frieren" typed in French and English returns the same show from the
  same catalog twice, and again from a second catalog in exhaustive mode.

Solution:
  1. Normalize each title (lowercase, drop punctuation, collapse spaces)
  2. Keep the first candidate seen for each key
  3. Drop later ones as-is (no field merging)

Input order encodes source priority, so "first seen" means "from the
highest-priority source that produced it".
================================================================================
"""

import re
import logging
import unicodedata
from typing import Iterable, List, Set

from .models import Candidate

logger = logging.getLogger(__name__)

# Anything that is not a letter, digit or whitespace (\w includes "_")
_PUNCTUATION = re.compile(r'[^\w\s]|_')
_WHITESPACE = re.compile(r'\s+')


def normalize_title(title: str) -> str:
    """
    Normalize a title into its deduplication key.

    Examples:
        "Frieren: Beyond Journey's End" -> "frieren beyond journeys end"
        "  ONE-PIECE!!  " -> "onepiece"
    """
    if not title:
        return ""
    # NFC first so a combining accent is not stripped as punctuation
    normalized = _PUNCTUATION.sub('', unicodedata.normalize('NFC', title).lower())
    return _WHITESPACE.sub(' ', normalized).strip()


def dedupe(candidates: Iterable[Candidate]) -> List[Candidate]:
    """
    Keep the first candidate per normalized title.

    Args:
        candidates: Candidates in priority order

    Returns:
        New list, never longer than the input
    """
    seen: Set[str] = set()
    unique: List[Candidate] = []
    total = 0

    for candidate in candidates:
        total += 1
        key = normalize_title(candidate.title)
        if key in seen:
            logger.debug(f"Dropping duplicate '{candidate.title}' from {candidate.source_id}")
            continue
        seen.add(key)
        unique.append(candidate)

    if total != len(unique):
        logger.debug(f"Deduplicated {total} candidates into {len(unique)}")
    return unique
