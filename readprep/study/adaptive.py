"""
Adaptive Difficulty.

Maps a learner's recent accuracy to the easy/medium/hard mix of the next
session: strong learners see more hard items, struggling learners more easy
ones.
"""
from __future__ import annotations

from loguru import logger

from readprep.selection.policy import EXAM_SELECTION_POLICY, DifficultyMix, SelectionPolicy

# (minimum accuracy, mix), checked top-down
DIFFICULTY_TIERS: tuple[tuple[float, DifficultyMix], ...] = (
    (80.0, DifficultyMix(easy=10, medium=40, hard=50)),
    (60.0, DifficultyMix(easy=20, medium=50, hard=30)),
    (40.0, DifficultyMix(easy=40, medium=45, hard=15)),
    (0.0, DifficultyMix(easy=60, medium=35, hard=5)),
)


class AdaptiveDifficultyCalculator:
    """Step function from accuracy percent to DifficultyMix."""

    def __init__(self, tiers: tuple[tuple[float, DifficultyMix], ...] = DIFFICULTY_TIERS):
        self.tiers = tuple(sorted(tiers, key=lambda tier: tier[0], reverse=True))

    def recommend(self, accuracy_percent: float) -> DifficultyMix:
        """
        Recommend a difficulty mix.

        Args:
            accuracy_percent: Recent accuracy; clamped to 0-100

        Returns:
            DifficultyMix summing to 100
        """
        accuracy = min(100.0, max(0.0, float(accuracy_percent)))
        for minimum, mix in self.tiers:
            if accuracy >= minimum:
                return mix
        return self.tiers[-1][1]

    def policy_for(
        self,
        accuracy_percent: float,
        base: SelectionPolicy = EXAM_SELECTION_POLICY,
    ) -> SelectionPolicy:
        """``base`` with its difficulty mix replaced by the recommendation."""
        mix = self.recommend(accuracy_percent)
        logger.debug(f"Accuracy {accuracy_percent}% -> mix {mix.as_dict()}")
        return base.with_distribution(mix)


def recommend_mix(accuracy_percent: float) -> DifficultyMix:
    """Convenience function using the default tiers."""
    return AdaptiveDifficultyCalculator().recommend(accuracy_percent)
