"""
Selection Policy Value Objects.

A SelectionPolicy is built per selection request and never mutated; use
``dataclasses.replace`` (or ``with_distribution``) to derive a variant.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace

from readprep.models import Difficulty


@dataclass(frozen=True)
class DifficultyMix:
    """Integer percentages per difficulty bucket; always sums to 100."""
    easy: int
    medium: int
    hard: int

    def __post_init__(self):
        values = (self.easy, self.medium, self.hard)
        if any(v < 0 for v in values):
            raise ValueError(f"Difficulty percentages must be non-negative: {values}")
        if sum(values) != 100:
            raise ValueError(f"Difficulty percentages must sum to 100, got {sum(values)}")

    def percent(self, difficulty: Difficulty) -> int:
        return getattr(self, Difficulty(difficulty).value)

    def as_dict(self) -> dict[str, int]:
        return {"easy": self.easy, "medium": self.medium, "hard": self.hard}

    def quotas(self, target_count: int) -> dict[Difficulty, int]:
        """
        Integer item quota per bucket.

        Easy and medium are rounded; hard absorbs the remainder so that the
        quotas always sum to ``target_count``.
        """
        # Half-up rounding in integer arithmetic
        easy = (target_count * self.easy + 50) // 100
        medium = (target_count * self.medium + 50) // 100
        # Rounding can overshoot (e.g. 50/50/0 of an odd count)
        overshoot = easy + medium - target_count
        if overshoot > 0:
            trim = min(overshoot, medium)
            medium -= trim
            easy -= overshoot - trim
        return {
            Difficulty.EASY: easy,
            Difficulty.MEDIUM: medium,
            Difficulty.HARD: target_count - easy - medium,
        }


@dataclass(frozen=True)
class SelectionPolicy:
    """
    Constraints for one selection request.

    Attributes:
        target_count: Maximum number of items to return
        max_items_per_passage: Hard cap on items sharing one passage
        min_unique_passage_percent: Soft target for unique passages among
            selected items (reported, never enforced by failure)
        enforce_genre_diversity: Round-robin genres within each bucket
        difficulty_distribution: Target easy/medium/hard mix
    """
    target_count: int
    max_items_per_passage: int = 2
    min_unique_passage_percent: int = 80
    enforce_genre_diversity: bool = True
    difficulty_distribution: DifficultyMix = field(
        default_factory=lambda: DifficultyMix(easy=20, medium=50, hard=30)
    )

    def __post_init__(self):
        if self.target_count < 0:
            raise ValueError(f"target_count must be >= 0, got {self.target_count}")
        if self.max_items_per_passage < 1:
            raise ValueError(f"max_items_per_passage must be >= 1, got {self.max_items_per_passage}")
        if not 0 <= self.min_unique_passage_percent <= 100:
            raise ValueError(
                f"min_unique_passage_percent must be within 0-100, got {self.min_unique_passage_percent}"
            )

    @property
    def min_unique_passages(self) -> int:
        """Unique passages needed to honour the soft uniqueness target."""
        return -(-self.target_count * self.min_unique_passage_percent // 100)

    def with_distribution(self, mix: DifficultyMix) -> SelectionPolicy:
        return replace(self, difficulty_distribution=mix)

    @classmethod
    def from_settings(cls, settings) -> SelectionPolicy:
        return cls(
            target_count=settings.session_target_count,
            max_items_per_passage=settings.max_items_per_passage,
            min_unique_passage_percent=settings.min_unique_passage_percent,
            enforce_genre_diversity=settings.enforce_genre_diversity,
        )


# Full-length reading section: 54 items, at most 2 per passage
EXAM_SELECTION_POLICY = SelectionPolicy(
    target_count=54,
    max_items_per_passage=2,
    min_unique_passage_percent=80,
    enforce_genre_diversity=True,
    difficulty_distribution=DifficultyMix(easy=20, medium=50, hard=30),
)
