"""
Core Data Models.

Value objects flowing through ingestion, selection and review:

    RawSource -> CandidateChunk -> Passage -> (external generation) -> PracticeItem

All models are frozen dataclasses; the core never mutates a value it was
handed, it returns a new one.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from enum import Enum


# =============================================================================
# Enums
# =============================================================================


class SourceType(str, Enum):
    """Where a block of raw text came from."""
    GUTENBERG = "gutenberg"    # Public-domain books
    WIKIPEDIA = "wikipedia"    # Encyclopedia extracts
    GUARDIAN = "guardian"      # News articles
    FILE = "file"              # User upload / plain text


class Genre(str, Enum):
    """Passage genre, used for diversity in selection."""
    LITERATURE = "literature"
    SCIENCE = "science"
    HISTORY = "history"
    SOCIAL_SCIENCE = "social-science"
    HUMANITIES = "humanities"
    JOURNALISM = "journalism"
    POETRY = "poetry"
    MEMOIR = "memoir"
    OTHER = "other"


class Difficulty(str, Enum):
    """Difficulty bucket for items and selection quotas."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# =============================================================================
# Ingestion Models
# =============================================================================


@dataclass(frozen=True)
class RawSource:
    """An opaque block of text plus provenance. Not persisted."""
    text: str
    source_type: SourceType = SourceType.FILE
    title: str = "Untitled"
    author: str | None = None
    category: str | None = None  # Library category (e.g. "drama", "opinion")


@dataclass(frozen=True)
class CandidateChunk:
    """A word-bounded slice of cleaned text, before quality filtering."""
    id: str
    text: str
    word_count: int


@dataclass(frozen=True)
class Passage:
    """A chunk that passed quality filtering."""
    id: str
    text: str
    word_count: int
    source_title: str
    genre: Genre = Genre.OTHER
    source_author: str | None = None


# =============================================================================
# Practice Items
# =============================================================================


@dataclass(frozen=True)
class PracticeItem:
    """
    One generated multiple-choice item, tied to exactly one passage.

    Created by the external generation step; read-only to the core.
    """
    id: str
    passage_id: str
    difficulty: Difficulty
    genre: Genre = Genre.OTHER


def passage_key(text: str) -> str:
    """
    Stable identity for a passage text.

    Uses the first 100 characters of the lowercased, whitespace-normalized
    text so trivially reformatted copies of a passage collapse together.
    """
    normalized = re.sub(r"\s+", " ", text.lower()).strip()[:100]
    digest = hashlib.sha1(normalized.encode("utf-8")).hexdigest()[:12]
    return f"passage-{digest}"
