"""
Configuration settings for readprep.

Uses Pydantic Settings for environment variable management with .env file support.
Core components never read settings implicitly; pass ``get_settings()`` to their
``from_settings`` constructors.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Passage Sizing
    # ========================================
    passage_min_words: int = Field(
        default=125,
        ge=1,
        description="Minimum words per passage",
    )
    passage_max_words: int = Field(
        default=200,
        ge=1,
        description="Maximum words per passage",
    )
    passage_target_words: int = Field(
        default=160,
        ge=1,
        description="Preferred passage length (clamped into min/max)",
    )

    # ========================================
    # Quality Thresholds
    # ========================================
    max_junk_ratio: float = Field(
        default=0.25,
        ge=0.0,
        le=1.0,
        description="Maximum share of non-prose symbols",
    )
    max_dialogue_ratio: float = Field(
        default=0.40,
        ge=0.0,
        le=1.0,
        description="Maximum share of characters inside quotation marks",
    )
    min_sentences: int = Field(
        default=3,
        ge=1,
        description="Minimum complete sentences per passage",
    )
    min_connectives: int = Field(
        default=3,
        ge=0,
        description="Minimum discourse connectives (narrative flow)",
    )
    min_avg_word_length: float = Field(
        default=3.0,
        ge=0.0,
        description="Minimum average word length in characters",
    )

    # ========================================
    # Session Selection
    # ========================================
    session_target_count: int = Field(
        default=54,
        ge=0,
        description="Items per practice session",
    )
    max_items_per_passage: int = Field(
        default=2,
        ge=1,
        description="Hard cap on items sharing one passage",
    )
    min_unique_passage_percent: int = Field(
        default=80,
        ge=0,
        le=100,
        description="Soft target for unique passages among selected items",
    )
    enforce_genre_diversity: bool = Field(
        default=True,
        description="Round-robin genres when filling difficulty buckets",
    )

    # ========================================
    # Review Queue
    # ========================================
    review_db_path: Path = Field(
        default=Path.home() / ".readprep" / "reviews.db",
        description="SQLite database for the review queue",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    def get_passage_bounds(self) -> dict[str, int]:
        return {
            "min": self.passage_min_words,
            "max": self.passage_max_words,
            "target": self.passage_target_words,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
