"""
Canonical vocabularies for genres and themes.

Catalogs spell the same concept differently ("Shounen", "Shonen",
"Shônen") and some records carry French labels next to English ones.
Each raw label maps to one canonical term; the canonical term is only a
grouping key, the raw label is what users keep seeing.

Terms missing from a dictionary pass through unchanged.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


GENRE_TRANSLATIONS: Mapping[str, str] = MappingProxyType({
    # Main genres
    'Action': 'Action',
    'Adventure': 'Aventure',
    'Aventure': 'Aventure',
    'Comedy': 'Comédie',
    'Comedie': 'Comédie',
    'Comédie': 'Comédie',
    'Drama': 'Drame',
    'Drame': 'Drame',
    'Ecchi': 'Ecchi',
    'Fantasy': 'Fantastique',
    'Fantastique': 'Fantastique',
    'Fantaisie': 'Fantastique',
    'Horror': 'Horreur',
    'Horreur': 'Horreur',
    'Mystery': 'Mystère',
    'Mystère': 'Mystère',
    'Psychological': 'Psychologique',
    'Psychologique': 'Psychologique',
    'Romance': 'Romance',
    'Sci-Fi': 'Science-Fiction',
    'Sci-fi': 'Science-Fiction',
    'Science Fiction': 'Science-Fiction',
    'Science-fiction': 'Science-Fiction',
    'Slice of Life': 'Tranche de vie',
    'Slice-of-Life': 'Tranche de vie',
    'Slice Of Life': 'Tranche de vie',
    'Slice of life': 'Tranche de vie',
    'Tranches de vie': 'Tranche de vie',
    'Sports': 'Sport',
    'Sport': 'Sport',
    'Supernatural': 'Surnaturel',
    'Surnaturel': 'Surnaturel',
    'Supernaturel': 'Surnaturel',
    'Thriller': 'Thriller',
    'Suspense': 'Suspense',
    'Award Winning': 'Primé',
    'Avant Garde': 'Avant-garde',
    'Gourmet': 'Gastronomie',
    'Girls Love': 'Amour entre filles',
    'Boys Love': 'Amour entre garçons',
    # Demographics
    'Shounen': 'Shōnen',
    'Shonen': 'Shōnen',
    'Shônen': 'Shōnen',
    'Shōnen': 'Shōnen',
    'Shoujo': 'Shōjo',
    'Shojo': 'Shōjo',
    'Shoujo(G)': 'Shōjo',
    'Shôjo': 'Shōjo',
    'Shōjo': 'Shōjo',
    'Seinen': 'Seinen',
    'Josei': 'Josei',
    # Formats filed as genres
    'Isekai': 'Isekai',
    'Mecha': 'Mecha',
    'Harem': 'Harem',
    'Reverse Harem': 'Harem inversé',
    'Manga': 'Manga',
    'Manhwa': 'Manhwa',
    'Manhua': 'Manhua',
    'Webtoon': 'Webtoon',
    'Webtoons': 'Webtoon',
    'Webcomic': 'Webcomic',
    # Themes some catalogs file as genres
    'Adult Cast': 'Distribution adulte',
    'Anthropomorphic': 'Anthropomorphe',
    'CGDCT': 'Filles mignonnes',
    'Childcare': "Garde d'enfants",
    'Crossdressing': 'Travestissement',
    'Delinquents': 'Délinquants',
    'Demons': 'Démons',
    'Gag Humor': 'Humour absurde',
    'Gore': 'Gore',
    'High Stakes Game': 'Jeu à haut risque',
    'Historical': 'Historique',
    'Historique': 'Historique',
    'Idols (Female)': 'Idoles (Femmes)',
    'Idols (Male)': 'Idoles (Hommes)',
    'Iyashikei': 'Iyashikei',
    'Love Polygon': 'Triangle amoureux',
    'Love Status Quo': 'Statu quo amoureux',
    'Magical Sex Shift': 'Changement de sexe magique',
    'Mahou Shoujo': 'Magical Girl',
    'Martial Arts': 'Arts martiaux',
    'Martial arts': 'Arts martiaux',
    'Arts Martiaux': 'Arts martiaux',
    'Art Martiaux': 'Arts martiaux',
    'Arts martiaux': 'Arts martiaux',
    'Medical': 'Médical',
    'Médical': 'Médical',
    'Military': 'Militaire',
    'Militaire': 'Militaire',
    'Music': 'Musique',
    'Musique': 'Musique',
    'Mythology': 'Mythologie',
    'Mythologie': 'Mythologie',
    'Organized Crime': 'Crime organisé',
    'Otaku Culture': 'Culture otaku',
    'Parody': 'Parodie',
    'Performing Arts': 'Arts du spectacle',
    'Pets': 'Animaux de compagnie',
    'Racing': 'Course',
    'Reincarnation': 'Réincarnation',
    'Romantic Subtext': 'Sous-texte romantique',
    'Samurai': 'Samouraï',
    'School': 'Vie Scolaire',
    'Showbiz': 'Show-business',
    'Space': 'Espace',
    'Strategy Game': 'Jeu de stratégie',
    'Super Power': 'Super-pouvoir',
    'Survival': 'Survie',
    'Team Sports': "Sport d'équipe",
    'Time Travel': 'Voyage dans le temps',
    'Vampire': 'Vampire',
    'Video Game': 'Jeu vidéo',
    'Villainess': 'Méchante',
    'Visual Arts': 'Arts visuels',
    'Workplace': 'Lieu de travail',
    'Zombie': 'Zombie',
})


THEME_TRANSLATIONS: Mapping[str, str] = MappingProxyType({
    'Achronological Order': 'Ordre achrone',
    'Adult Cast': 'Distribution adulte',
    'Anthropomorphic': 'Anthropomorphe',
    'CGDCT': 'Filles mignonnes',
    'Childcare': "Garde d'enfants",
    'Combat Sports': 'Sports de combat',
    'Crossdressing': 'Travestissement',
    'Delinquents': 'Délinquants',
    'Detective': 'Détective',
    'Educational': 'Éducatif',
    'Gag Humor': 'Humour absurde',
    'Gore': 'Gore',
    'Harem': 'Harem',
    'High Stakes Game': 'Jeu à haut risque',
    'Historical': 'Historique',
    'Idols': 'Idoles',
    'Isekai': 'Isekai',
    'Iyashikei': 'Iyashikei',
    'Love Polygon': 'Triangle amoureux',
    'Magical Sex Shift': 'Changement de sexe magique',
    'Mahou Shoujo': 'Magical Girl',
    'Martial Arts': 'Arts martiaux',
    'Medical': 'Médical',
    'Military': 'Militaire',
    'Music': 'Musique',
    'Mythology': 'Mythologie',
    'Organized Crime': 'Crime organisé',
    'Parody': 'Parodie',
    'Performing Arts': 'Arts du spectacle',
    'Pets': 'Animaux de compagnie',
    'Psychological': 'Psychologique',
    'Racing': 'Course',
    'Reincarnation': 'Réincarnation',
    'Reverse Harem': 'Harem inversé',
    'Romantic Subtext': 'Sous-texte romantique',
    'Samurai': 'Samouraï',
    'School': 'Vie Scolaire',
    'Sci-Fi': 'Science-Fiction',
    'Showbiz': 'Show-business',
    'Space': 'Espace',
    'Strategy Game': 'Jeu de stratégie',
    'Super Power': 'Super-pouvoir',
    'Survival': 'Survie',
    'Team Sports': "Sport d'équipe",
    'Time Travel': 'Voyage dans le temps',
    'Vampire': 'Vampire',
    'Video Game': 'Jeu vidéo',
    'Villainess': 'Méchante',
    'Visual Arts': 'Arts visuels',
    'Workplace': 'Lieu de travail',
    'Zombie': 'Zombie',
})


@dataclass(frozen=True, eq=False)
class CanonicalDictionary:
    """Named, read-only raw term -> canonical term table."""

    name: str
    mapping: Mapping[str, str]

    def __post_init__(self):
        if not isinstance(self.mapping, MappingProxyType):
            object.__setattr__(self, 'mapping', MappingProxyType(dict(self.mapping)))

    def canonicalize(self, term: str) -> str:
        """Canonical term for `term`, or the trimmed term itself."""
        if not term:
            return ''
        trimmed = term.strip()
        return self.mapping.get(trimmed, trimmed)

    def __contains__(self, term: str) -> bool:
        return term.strip() in self.mapping

    def __len__(self) -> int:
        return len(self.mapping)


GENRES = CanonicalDictionary('genre', GENRE_TRANSLATIONS)
THEMES = CanonicalDictionary('theme', THEME_TRANSLATIONS)
