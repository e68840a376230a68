"""
Processing module for passage ingestion.

Turns raw book, encyclopedia and news text into clean, exam-sized passages:
cleaning, word-bounded chunking, structural quality filtering and genre
inference.
"""

from .chunker import (
    ChunkingStats,
    PassageChunker,
    analyze_chunks,
    count_words,
    estimate_reading_time,
    split_sentences,
)
from .cleaner import TextCleaner, clean_text
from .genre import CATEGORY_TO_GENRE, EXAM_GENRE_DISTRIBUTION, detect_genre, genre_for_category
from .pipeline import IngestionResult, PassageIngestionPipeline, ingest_text
from .quality_filter import PassageQualityFilter, QualityCheck, QualityValidation

__all__ = [
    "CATEGORY_TO_GENRE",
    "ChunkingStats",
    "EXAM_GENRE_DISTRIBUTION",
    "IngestionResult",
    "PassageChunker",
    "PassageIngestionPipeline",
    "PassageQualityFilter",
    "QualityCheck",
    "QualityValidation",
    "TextCleaner",
    "analyze_chunks",
    "clean_text",
    "count_words",
    "detect_genre",
    "estimate_reading_time",
    "genre_for_category",
    "ingest_text",
    "split_sentences",
]
