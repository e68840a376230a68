"""
Genre Inference for Passages.

Keyword heuristics used when a source arrives without a genre, plus the
mapping from library categories to exam genres.
"""
from __future__ import annotations

import re
from typing import Optional

from readprep.models import Genre

# Library category -> exam genre
CATEGORY_TO_GENRE: dict[str, Genre] = {
    "literature": Genre.LITERATURE,
    "poetry": Genre.POETRY,
    "drama": Genre.LITERATURE,  # Drama counts as literature
    "history": Genre.HISTORY,
    "science": Genre.SCIENCE,
    "politics": Genre.SOCIAL_SCIENCE,
    "culture": Genre.HUMANITIES,
    "opinion": Genre.JOURNALISM,
}

# Approximate genre mix of the official exam (percent)
EXAM_GENRE_DISTRIBUTION: dict[Genre, int] = {
    Genre.LITERATURE: 25,
    Genre.SCIENCE: 25,
    Genre.HISTORY: 20,
    Genre.SOCIAL_SCIENCE: 20,
    Genre.HUMANITIES: 5,
    Genre.JOURNALISM: 3,
    Genre.POETRY: 1,
    Genre.MEMOIR: 1,
    Genre.OTHER: 0,
}

# Checked in order; first genre with any keyword wins
GENRE_KEYWORDS: tuple[tuple[Genre, tuple[str, ...]], ...] = (
    (Genre.POETRY, ("poem", "verse", "stanza")),
    (Genre.SCIENCE, ("study", "research", "experiment", "hypothesis", "data", "findings")),
    (Genre.HISTORY, ("century", "historical", "declaration", "president", "congress")),
    (Genre.JOURNALISM, ("reporter", "news", "article", "according to", "sources say")),
    (Genre.SOCIAL_SCIENCE, ("psychology", "society", "behavior", "economic", "cultural")),
    (Genre.LITERATURE, ("novel", "story", "character", "narrator", "she said", "he said")),
    (Genre.MEMOIR, ("i remember", "my father", "my mother", "when i was", "autobiography")),
    (Genre.HUMANITIES, ("art", "philosophy", "aesthetic", "culture", "museum")),
)

_YEAR_1800S_1900S = re.compile(r"\b(?:18|19)\d{2}\b")


def genre_for_category(category: Optional[str]) -> Optional[Genre]:
    """Map a library category tag to a genre (None if unknown)."""
    if not category:
        return None
    return CATEGORY_TO_GENRE.get(category.strip().lower())


def _looks_like_verse(passage: str) -> bool:
    return bool(re.search(r"\n\s*\n", passage)) and len(passage.split("\n")) > 5


def detect_genre(passage: str, source: Optional[str] = None) -> Genre:
    """
    Detect genre from passage text (and optional source title).

    Keywords are matched as substrings of the lowercased text, the same
    loose matching the library import has always used.
    """
    text = f"{passage} {source or ''}".lower()

    for genre, keywords in GENRE_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return genre
        if genre == Genre.POETRY and _looks_like_verse(passage):
            return Genre.POETRY
        if genre == Genre.HISTORY and _YEAR_1800S_1900S.search(text):
            return Genre.HISTORY

    return Genre.OTHER
