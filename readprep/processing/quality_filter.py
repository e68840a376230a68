"""
Structural Quality Filter for Candidate Passages.

A hard admit/reject gate applied immediately before a chunk becomes a
Passage. Each heuristic is a named predicate (``QualityCheck``) so that
every rejection reason can be unit-tested in isolation and the
vocabularies (connectives, boilerplate markers) can be swapped per locale
without touching control flow.

Checks (a candidate is rejected if ANY fails):
1. min_words       - too short for an exam passage
2. sentence_count  - fewer than 3 terminal marks (lists, fragments)
3. junk_ratio      - digits/symbols dominate (tables, data dumps)
4. dialogue_ratio  - quoted dialogue dominates (scripts)
5. complete_start  - truncated sentence start
6. complete_end    - truncated ending
7. boilerplate     - headings, citations, URLs, distribution notices
8. word_length     - abbreviation lists, gibberish
9. narrative_flow  - disconnected sentences without prose connectives

No partial credit: this is a gate, not a ranking.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from loguru import logger

from readprep.processing import thresholds
from readprep.processing.chunker import count_words

# Narrative connective cues (causal, temporal, referential, pronouns)
DEFAULT_CONNECTIVES: tuple[str, ...] = (
    "however", "therefore", "moreover", "furthermore", "consequently",
    "as a result", "in addition", "for example", "for instance", "in fact",
    "on the other hand", "nevertheless", "meanwhile",
    "after", "before", "when", "while", "although", "because", "since",
    "thus", "hence",
    "he", "she", "they", "it", "this", "that",
)

# Boilerplate markers, matched against the first line and the leading window
DEFAULT_BOILERPLATE_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"^figure\s*\d", re.IGNORECASE),
    re.compile(r"^table\s*\d", re.IGNORECASE),
    re.compile(r"^fig\.\s*\d", re.IGNORECASE),
    re.compile(r"^references$", re.IGNORECASE),
    re.compile(r"^bibliography$", re.IGNORECASE),
    re.compile(r"^acknowledgments?$", re.IGNORECASE),
    re.compile(r"^appendix", re.IGNORECASE),
    re.compile(r"^source:", re.IGNORECASE),
    re.compile(r"^image:", re.IGNORECASE),
    re.compile(r"^photo:", re.IGNORECASE),
    re.compile(r"^\[\d+\]"),  # Citation markers
    re.compile(r"https?://", re.IGNORECASE),
    re.compile(r"www\.", re.IGNORECASE),
    re.compile(r"doi\.org", re.IGNORECASE),
    re.compile(r"isbn", re.IGNORECASE),
    re.compile(r"pp\.\s*\d+", re.IGNORECASE),  # Page numbers
    re.compile(r"©|\(c\)", re.IGNORECASE),
    re.compile(r"\[Illustration", re.IGNORECASE),
    re.compile(r"^INTRODUCTION$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^PREFACE$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^CONTENTS$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^CHAPTER\s+[IVXLCDM]+$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"Project Gutenberg", re.IGNORECASE),
    re.compile(r"eBook", re.IGNORECASE),
)

_TERMINAL_MARKS = re.compile(r"[.!?]+")
_LETTERS = re.compile(r"[A-Za-z]")
_DIGITS = re.compile(r"[0-9]")
_SYMBOLS = re.compile(r"[^A-Za-z0-9\s.,!?'\"()\-]")
_QUOTED_SPANS = re.compile(r"\"[^\"]*\"|“[^”]*”")
_COMPLETE_START = re.compile(r"^[\"'“‘]?[A-Z]")
_COMPLETE_END = re.compile(r"[.!?][\"'”’]?$")


# =============================================================================
# Measurements
# =============================================================================

def count_sentences(text: str) -> int:
    """Count runs of terminal punctuation."""
    return len(_TERMINAL_MARKS.findall(text))


def junk_ratio(text: str) -> float:
    """Share of digits and non-basic symbols among content characters."""
    letters = len(_LETTERS.findall(text))
    digits = len(_DIGITS.findall(text))
    symbols = len(_SYMBOLS.findall(text))
    total = letters + digits + symbols
    if total == 0:
        return 1.0
    return (digits + symbols) / total


def dialogue_ratio(text: str) -> float:
    """Share of characters inside double-quoted spans."""
    if not text:
        return 0.0
    quoted = sum(len(span) for span in _QUOTED_SPANS.findall(text))
    return quoted / len(text)


def average_word_length(text: str) -> float:
    words = text.split()
    if not words:
        return 0.0
    return sum(len(w) for w in words) / len(words)


def count_connectives(text: str, connectives: Iterable[str] = DEFAULT_CONNECTIVES) -> int:
    """Count distinct connective cues present (whole-word, case-insensitive)."""
    lowered = text.lower()
    return sum(
        1 for cue in connectives
        if re.search(rf"\b{re.escape(cue.lower())}\b", lowered)
    )


def has_boilerplate(
    text: str,
    patterns: Iterable[re.Pattern] = DEFAULT_BOILERPLATE_PATTERNS,
    window: int = thresholds.BOILERPLATE_WINDOW,
) -> bool:
    """Check the first line and the leading window for boilerplate markers."""
    stripped = text.strip()
    first_line = stripped.split("\n", 1)[0].strip()
    head = stripped[:window]
    return any(p.search(first_line) or p.search(head) for p in patterns)


# =============================================================================
# Predicates
# =============================================================================

@dataclass(frozen=True)
class QualityCheck:
    """A named predicate; ``predicate(text)`` is True when the text passes."""
    name: str
    description: str
    predicate: Callable[[str], bool]

    def passes(self, text: str) -> bool:
        return self.predicate(text)


@dataclass
class QualityValidation:
    """Result of quality validation."""
    is_valid: bool
    failed_checks: list[str] = field(default_factory=list)
    reason: Optional[str] = None


class PassageQualityFilter:
    """
    Admit/reject gate for candidate passages.

    Usage:
        quality = PassageQualityFilter()
        if quality.is_acceptable(chunk.text):
            ...
        result = quality.evaluate(chunk.text)
        print(result.failed_checks)
    """

    def __init__(
        self,
        min_words: int = thresholds.MIN_WORDS,
        min_sentences: int = thresholds.MIN_SENTENCES,
        max_junk_ratio: float = thresholds.MAX_JUNK_RATIO,
        max_dialogue_ratio: float = thresholds.MAX_DIALOGUE_RATIO,
        min_avg_word_length: float = thresholds.MIN_AVG_WORD_LENGTH,
        min_connectives: int = thresholds.MIN_CONNECTIVES,
        connectives: Iterable[str] = DEFAULT_CONNECTIVES,
        boilerplate_patterns: Iterable[re.Pattern] = DEFAULT_BOILERPLATE_PATTERNS,
    ):
        self.min_words = min_words
        self.min_sentences = min_sentences
        self.max_junk_ratio = max_junk_ratio
        self.max_dialogue_ratio = max_dialogue_ratio
        self.min_avg_word_length = min_avg_word_length
        self.min_connectives = min_connectives
        self.connectives = tuple(connectives)
        self.boilerplate_patterns = tuple(boilerplate_patterns)
        self.checks: tuple[QualityCheck, ...] = self._build_checks()

    @classmethod
    def from_settings(cls, settings) -> PassageQualityFilter:
        return cls(
            min_words=settings.passage_min_words,
            min_sentences=settings.min_sentences,
            max_junk_ratio=settings.max_junk_ratio,
            max_dialogue_ratio=settings.max_dialogue_ratio,
            min_avg_word_length=settings.min_avg_word_length,
            min_connectives=settings.min_connectives,
        )

    def _build_checks(self) -> tuple[QualityCheck, ...]:
        return (
            QualityCheck(
                "min_words",
                f"At least {self.min_words} words",
                lambda t: count_words(t) >= self.min_words,
            ),
            QualityCheck(
                "sentence_count",
                f"At least {self.min_sentences} terminal punctuation marks",
                lambda t: count_sentences(t) >= self.min_sentences,
            ),
            QualityCheck(
                "junk_ratio",
                f"Digits/symbols at most {self.max_junk_ratio:.0%} of content",
                lambda t: junk_ratio(t) <= self.max_junk_ratio,
            ),
            QualityCheck(
                "dialogue_ratio",
                f"Quoted dialogue at most {self.max_dialogue_ratio:.0%} of text",
                lambda t: dialogue_ratio(t) <= self.max_dialogue_ratio,
            ),
            QualityCheck(
                "complete_start",
                "Starts with a capital letter (optionally after an opening quote)",
                lambda t: bool(_COMPLETE_START.match(t.strip())),
            ),
            QualityCheck(
                "complete_end",
                "Ends with terminal punctuation (optionally before a closing quote)",
                lambda t: bool(_COMPLETE_END.search(t.strip())),
            ),
            QualityCheck(
                "boilerplate",
                "No headings, citations, URLs or distribution notices up front",
                lambda t: not has_boilerplate(t, self.boilerplate_patterns),
            ),
            QualityCheck(
                "word_length",
                f"Average word length at least {self.min_avg_word_length}",
                lambda t: average_word_length(t) >= self.min_avg_word_length,
            ),
            QualityCheck(
                "narrative_flow",
                f"At least {self.min_connectives} distinct narrative connectives",
                lambda t: count_connectives(t, self.connectives) >= self.min_connectives,
            ),
        )

    def evaluate(self, text: str) -> QualityValidation:
        """
        Run every check and report which ones failed.

        Args:
            text: Candidate passage text

        Returns:
            QualityValidation with is_valid and the names of failed checks
        """
        failed = [check.name for check in self.checks if not check.passes(text)]
        if not failed:
            return QualityValidation(is_valid=True)

        logger.debug(f"Rejected candidate ({count_words(text)} words): {', '.join(failed)}")
        return QualityValidation(
            is_valid=False,
            failed_checks=failed,
            reason=f"Failed checks: {', '.join(failed)}",
        )

    def is_acceptable(self, text: str) -> bool:
        """True when the text passes every check."""
        return all(check.passes(text) for check in self.checks)


_filter_instance: Optional[PassageQualityFilter] = None


def get_quality_filter() -> PassageQualityFilter:
    """Get or create the default filter."""
    global _filter_instance
    if _filter_instance is None:
        _filter_instance = PassageQualityFilter()
    return _filter_instance


def is_acceptable(text: str) -> bool:
    """Convenience function using the default thresholds."""
    return get_quality_filter().is_acceptable(text)
