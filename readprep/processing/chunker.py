"""
Word-Bounded Passage Chunker.

Splits cleaned text into candidate passages sized like a real exam's
medium-length reading passage (125-200 words by default).

Key Features:
1. Accumulates whole paragraphs while the running buffer fits the ceiling
2. Breaks oversized paragraphs at sentence boundaries with the same rule
3. Only flushes a buffer once it has reached the minimum length
4. Deterministic: identical input and limits always give identical chunks

Every emitted chunk satisfies ``min_words <= word_count <= max_words``.
Text that cannot be packed into that window is dropped, never stretched.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from readprep.models import CandidateChunk
from readprep.processing import thresholds

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
# Terminal punctuation (with an optional closing quote) followed by whitespace
_SENTENCE_END = re.compile(r"[.!?]+[\"']?(?=\s|$)")


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    return len(text.split())


def split_sentences(text: str) -> list[str]:
    """
    Split text at terminal punctuation, keeping any trailing fragment.

    Sentences are slices of the input, so punctuation inside a word
    ("U.S.", "3.5") and leading ellipses survive unchanged.
    """
    sentences = []
    start = 0
    for match in _SENTENCE_END.finditer(text):
        sentence = text[start:match.end()].strip()
        if sentence:
            sentences.append(sentence)
        start = match.end()
    tail = text[start:].strip()
    if tail:
        sentences.append(tail)
    return sentences


def estimate_reading_time(text: str, words_per_minute: int = thresholds.READING_WORDS_PER_MINUTE) -> int:
    """Estimate reading time in whole seconds (rounded up)."""
    words = count_words(text)
    return -(-words * 60 // words_per_minute)


@dataclass
class _Buffer:
    """Running passage buffer."""
    text: str = ""
    words: int = 0

    def append(self, unit: str, words: int, new_paragraph: bool) -> None:
        if self.text:
            self.text += ("\n\n" if new_paragraph else " ") + unit
        else:
            self.text = unit
        self.words += words

    def reset(self) -> None:
        self.text = ""
        self.words = 0


class PassageChunker:
    """
    Accumulate/flush chunker over paragraphs and sentences.

    Usage:
        chunker = PassageChunker()
        for chunk in chunker.chunk(cleaned_text):
            print(chunk.id, chunk.word_count)
    """

    def __init__(
        self,
        min_words: int = thresholds.MIN_WORDS,
        max_words: int = thresholds.MAX_WORDS,
        target_words: int = thresholds.TARGET_WORDS,
    ):
        """
        Initialize the chunker.

        Args:
            min_words: Minimum words before a buffer may be emitted
            max_words: Hard ceiling for any emitted chunk
            target_words: Preferred passage length (informational default)
        """
        if min_words < 1 or max_words < min_words:
            raise ValueError(f"Invalid word bounds: min={min_words}, max={max_words}")
        self.min_words = min_words
        self.max_words = max_words
        self.target_words = target_words

    @classmethod
    def from_settings(cls, settings) -> PassageChunker:
        return cls(
            min_words=settings.passage_min_words,
            max_words=settings.passage_max_words,
            target_words=settings.passage_target_words,
        )

    def chunk(self, cleaned_text: str, target_words: Optional[int] = None) -> list[CandidateChunk]:
        """
        Split cleaned text into candidate chunks.

        Args:
            cleaned_text: Output of TextCleaner
            target_words: Optional tighter ceiling, clamped into
                [min_words, max_words]; larger values are ignored

        Returns:
            Candidate chunks in document order (possibly empty)
        """
        ceiling = self._ceiling(target_words)
        chunks: list[CandidateChunk] = []
        buffer = _Buffer()

        def flush() -> None:
            chunks.append(CandidateChunk(
                id=f"chunk-{len(chunks)}",
                text=buffer.text.strip(),
                word_count=buffer.words,
            ))
            buffer.reset()

        def add_sentence(sentence: str, new_paragraph: bool) -> None:
            words = count_words(sentence)
            if words > ceiling:
                # Can never fit a chunk on its own
                if buffer.words >= self.min_words:
                    flush()
                buffer.reset()
                return
            if buffer.words + words <= ceiling:
                buffer.append(sentence, words, new_paragraph)
                return
            if buffer.words >= self.min_words:
                flush()
            else:
                buffer.reset()
            buffer.append(sentence, words, new_paragraph)

        for paragraph in _PARAGRAPH_BREAK.split(cleaned_text or ""):
            paragraph = paragraph.strip()
            if not paragraph:
                continue
            words = count_words(paragraph)

            if words <= ceiling and buffer.words + words <= ceiling:
                buffer.append(paragraph, words, new_paragraph=True)
                continue

            if words <= ceiling and buffer.words >= self.min_words:
                flush()
                buffer.append(paragraph, words, new_paragraph=True)
                continue

            # Oversized paragraph, or a short buffer that only sentences can top up
            for i, sentence in enumerate(split_sentences(paragraph)):
                add_sentence(sentence, new_paragraph=(i == 0))

        if buffer.words >= self.min_words:
            flush()

        logger.debug(
            f"Chunked {count_words(cleaned_text or '')} words into {len(chunks)} chunks "
            f"(ceiling={ceiling})"
        )
        return chunks

    def _ceiling(self, target_words: Optional[int]) -> int:
        if target_words is None:
            return self.max_words
        return max(self.min_words, min(target_words, self.max_words))


# =============================================================================
# Chunk Statistics
# =============================================================================

@dataclass
class ChunkingStats:
    """Statistics about chunking results."""
    total_chunks: int = 0
    total_words: int = 0
    avg_word_count: float = 0.0
    min_word_count: int = 0
    max_word_count: int = 0
    word_counts: list[int] = field(default_factory=list)


def analyze_chunks(chunks: list[CandidateChunk]) -> ChunkingStats:
    """Analyze a list of chunks and return statistics."""
    if not chunks:
        return ChunkingStats()

    word_counts = [c.word_count for c in chunks]
    return ChunkingStats(
        total_chunks=len(chunks),
        total_words=sum(word_counts),
        avg_word_count=sum(word_counts) / len(word_counts),
        min_word_count=min(word_counts),
        max_word_count=max(word_counts),
        word_counts=word_counts,
    )
