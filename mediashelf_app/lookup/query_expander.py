"""
Query expansion for catalog lookups.

Catalogs index titles in English or romaji, while users often type the
French edition title ("Le Septième Prince"). The expander produces a
small ordered set of variants:

    "le septième prince" -> ["le septième prince",
                             "septième prince",
                             "le seventh prince",
                             "seventh prince"]

The original (lower-cased, trimmed) query is always the first variant.
"""

import re
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence

from .models import QueryVariant, VariantOrigin

MAX_VARIANTS = 5

# Leading French definite articles; "l'" attaches to the next word
ARTICLE_PATTERN = re.compile(r"^(?:(?:le|la|les)\s+|l['’])")

# Ordinal and feminine endings typical of French titles
FRENCH_WORD_PATTERN = re.compile(r"\w+(?:ième|ère|ème)\b")

QUOTE_CHARS = "\"'«»“”‘’"

# French keyword -> English equivalents
FRENCH_KEYWORDS: Mapping[str, Sequence[str]] = MappingProxyType({
    # Ordinals
    'premier': ('first',),
    'première': ('first',),
    'deuxième': ('second',),
    'second': ('second',),
    'seconde': ('second',),
    'troisième': ('third',),
    'quatrième': ('fourth',),
    'cinquième': ('fifth',),
    'sixième': ('sixth',),
    'septième': ('seventh',),
    'huitième': ('eighth',),
    'neuvième': ('ninth',),
    'dixième': ('tenth',),
    # Narrative nouns
    'prince': ('prince',),
    'princesse': ('princess',),
    'roi': ('king',),
    'reine': ('queen',),
    'héros': ('hero',),
    'héroïne': ('heroine',),
    'monde': ('world',),
    'chevalier': ('knight',),
    'royaume': ('kingdom',),
    'seigneur': ('lord',),
    'démon': ('demon',),
    'dragon': ('dragon',),
    'épée': ('sword',),
    'magicien': ('magician', 'wizard'),
    'sorcière': ('witch',),
    'guerrier': ('warrior',),
    'ange': ('angel',),
    'dieu': ('god',),
    'ombre': ('shadow',),
    'maître': ('master',),
    'vie': ('life',),
    'mort': ('death',),
    'amour': ('love',),
    'nuit': ('night',),
    'ciel': ('sky', 'heaven'),
    'légende': ('legend',),
    'école': ('school',),
    'académie': ('academy',),
    'fille': ('girl', 'daughter'),
    'garçon': ('boy',),
})


def normalize_query(query: str) -> str:
    """Lower-case and trim."""
    return query.strip().lower()


def strip_article(text: str) -> str:
    """Remove a leading French definite article, if any."""
    return ARTICLE_PATTERN.sub('', text, count=1).strip()


def is_french_query(text: str) -> bool:
    """Heuristic: leading article or an -ième/-ère/-ème word."""
    normalized = normalize_query(text)
    return bool(ARTICLE_PATTERN.match(normalized) or FRENCH_WORD_PATTERN.search(normalized))


class QueryExpander:
    """Turns one query into at most MAX_VARIANTS query variants."""

    def __init__(
        self,
        keywords: Optional[Mapping[str, Sequence[str]]] = None,
        max_variants: int = MAX_VARIANTS
    ):
        self.keywords = MappingProxyType(dict(keywords)) if keywords is not None else FRENCH_KEYWORDS
        self.max_variants = max(1, max_variants)

    def expand(self, query: str) -> List[QueryVariant]:
        """
        Expand a query into ordered, unique variants.

        Args:
            query: Raw user query

        Returns:
            1..max_variants variants, the normalized query first
        """
        normalized = normalize_query(query)
        variants = [QueryVariant(normalized, VariantOrigin.IDENTITY)]

        stripped = strip_article(normalized)
        if stripped and stripped != normalized:
            variants.append(QueryVariant(stripped, VariantOrigin.ARTICLE_STRIPPED))

        if is_french_query(normalized):
            variants.extend(self._translated_variants(normalized))

        return self._unique(variants)[:self.max_variants]

    def _translated_variants(self, normalized: str) -> List[QueryVariant]:
        results = []
        for word in normalized.split():
            key = word.strip(QUOTE_CHARS)
            equivalents = self.keywords.get(key)
            if not key or not equivalents:
                continue

            pattern = re.compile(rf"(?<!\w){re.escape(key)}(?!\w)")
            for english in equivalents:
                translated = pattern.sub(english, normalized)
                if translated == normalized:
                    continue
                results.append(QueryVariant(translated, VariantOrigin.TRANSLATED))

                translated_stripped = strip_article(translated)
                if translated_stripped and translated_stripped != translated:
                    results.append(QueryVariant(
                        translated_stripped,
                        VariantOrigin.TRANSLATED_ARTICLE_STRIPPED
                    ))
        return results

    @staticmethod
    def _unique(variants: List[QueryVariant]) -> List[QueryVariant]:
        seen = set()
        unique = []
        for variant in variants:
            if variant.text in seen:
                continue
            seen.add(variant.text)
            unique.append(variant)
        return unique


_default_expander = QueryExpander()


def expand_query(query: str) -> List[QueryVariant]:
    """Expand a query with the built-in French keyword table."""
    return _default_expander.expand(query)
