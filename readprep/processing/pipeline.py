"""
Passage Ingestion Pipeline.

raw text -> TextCleaner -> PassageChunker -> PassageQualityFilter -> Passages

The pipeline owns the accept/reject decision and nothing else: fetching the
raw text and generating items from the accepted passages are external steps.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from readprep.models import Genre, Passage, RawSource, passage_key
from readprep.processing.chunker import PassageChunker
from readprep.processing.cleaner import TextCleaner
from readprep.processing.genre import detect_genre, genre_for_category
from readprep.processing.quality_filter import PassageQualityFilter


@dataclass
class IngestionResult:
    """Accepted passages plus rejection bookkeeping for one source."""
    passages: list[Passage] = field(default_factory=list)
    candidates_seen: int = 0
    rejected: int = 0
    rejection_reasons: Counter = field(default_factory=Counter)

    @property
    def acceptance_rate(self) -> float:
        if self.candidates_seen == 0:
            return 0.0
        return len(self.passages) / self.candidates_seen


class PassageIngestionPipeline:
    """
    Turns raw source text into quality-filtered passages.

    Usage:
        pipeline = PassageIngestionPipeline()
        result = pipeline.ingest(RawSource(text=book, source_type=SourceType.GUTENBERG,
                                           title="Emma", author="Jane Austen"))
        for passage in result.passages:
            ...
    """

    def __init__(
        self,
        chunker: Optional[PassageChunker] = None,
        quality_filter: Optional[PassageQualityFilter] = None,
    ):
        self.chunker = chunker or PassageChunker()
        self.quality_filter = quality_filter or PassageQualityFilter(min_words=self.chunker.min_words)

    @classmethod
    def from_settings(cls, settings) -> PassageIngestionPipeline:
        return cls(
            chunker=PassageChunker.from_settings(settings),
            quality_filter=PassageQualityFilter.from_settings(settings),
        )

    def ingest(
        self,
        source: RawSource,
        genre: Optional[Genre] = None,
        target_words: Optional[int] = None,
    ) -> IngestionResult:
        """
        Clean, chunk and filter one source.

        Args:
            source: Raw text plus provenance
            genre: Genre for every passage; falls back to the source
                category, then to per-passage detection
            target_words: Optional tighter chunk ceiling

        Returns:
            IngestionResult with accepted passages in document order
        """
        cleaned = TextCleaner(source.source_type).clean(source.text)
        chunks = self.chunker.chunk(cleaned, target_words=target_words)
        fixed_genre = genre or genre_for_category(source.category)

        result = IngestionResult(candidates_seen=len(chunks))
        seen_ids: set[str] = set()

        for chunk in chunks:
            verdict = self.quality_filter.evaluate(chunk.text)
            if not verdict.is_valid:
                result.rejected += 1
                result.rejection_reasons.update(verdict.failed_checks)
                continue

            passage_id = passage_key(chunk.text)
            if passage_id in seen_ids:
                logger.debug(f"Skipping duplicate passage {passage_id} from '{source.title}'")
                continue
            seen_ids.add(passage_id)

            result.passages.append(Passage(
                id=passage_id,
                text=chunk.text,
                word_count=chunk.word_count,
                source_title=source.title,
                source_author=source.author,
                genre=fixed_genre or detect_genre(chunk.text, source.title),
            ))

        logger.info(
            f"Ingested '{source.title}' ({source.source_type.value}): "
            f"{len(result.passages)}/{result.candidates_seen} candidates accepted"
        )
        return result


def ingest_text(
    text: str,
    title: str = "Untitled",
    author: Optional[str] = None,
    genre: Optional[Genre] = None,
    **source_kwargs,
) -> list[Passage]:
    """Convenience function: ingest one text with default thresholds."""
    source = RawSource(text=text, title=title, author=author, **source_kwargs)
    return PassageIngestionPipeline().ingest(source, genre=genre).passages
