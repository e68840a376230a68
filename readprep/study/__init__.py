"""
Study module: adaptive difficulty and spaced review of missed items.
"""

from .adaptive import DIFFICULTY_TIERS, AdaptiveDifficultyCalculator, recommend_mix
from .scheduler import ReviewQueueStats, ReviewScheduler, SM2Config
from .state_store import (
    InMemoryReviewRepository,
    ReviewRecord,
    ReviewRepository,
    SQLiteReviewRepository,
)

__all__ = [
    "DIFFICULTY_TIERS",
    "AdaptiveDifficultyCalculator",
    "InMemoryReviewRepository",
    "ReviewQueueStats",
    "ReviewRecord",
    "ReviewRepository",
    "ReviewScheduler",
    "SM2Config",
    "SQLiteReviewRepository",
    "recommend_mix",
]
