"""Static table of TNTVillage release categories."""

from types import MappingProxyType
from typing import Mapping

# Codes 5, 15-20 and 33 never appear in the release dump.
CATEGORIES: Mapping[int, str] = MappingProxyType(
    {
        1: "Film TV e programmi",
        2: "Musica",
        3: "E Books",
        4: "Film",
        6: "Linux",
        7: "Anime",
        8: "Cartoni",
        9: "Macintosh",
        10: "Windows Software",
        11: "Pc Game",
        12: "Playstation",
        13: "Students Releases",
        14: "Documentari",
        21: "Video Musicali",
        22: "Sport",
        23: "Teatro",
        24: "Wrestling",
        25: "Varie",
        26: "Xbox",
        27: "Immagini sfondi",
        28: "Altri Giochi",
        29: "Serie TV",
        30: "Fumetteria",
        31: "Trash",
        32: "Nintendo",
        34: "A Book",
        35: "Podcast",
        36: "Edicola",
        37: "Mobile",
    }
)

# Query value meaning "any category"; it is not a code of the table.
ANY_CATEGORY = 0


def category_name(code: int, table: Mapping[int, str] = CATEGORIES) -> str:
    """Return the display name for a category code, blank when unknown."""
    return table.get(code, "")


def sorted_categories(
    table: Mapping[int, str] = CATEGORIES,
) -> list[tuple[int, str]]:
    """Return ``(code, name)`` pairs ordered by code."""
    return sorted(table.items())
