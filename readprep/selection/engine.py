"""
Diversity-Constrained Item Selection.

Builds a practice session from a pool of generated items:

1. Quota pass - split the target count across easy/medium/hard by the
   policy's distribution; fill each bucket round-robin across genres
   (least-used genre first), never exceeding the per-passage cap.
2. Backfill pass - if a bucket ran dry, fill the remaining slots from any
   difficulty with the same preferences.

Passage uniqueness (``min_unique_passage_percent``) is a soft preference:
items from unused passages are tried first until the target number of
unique passages is reached, and the achieved ratio is reported through
``SelectionStats``. Scarcity never raises; the engine returns what it can.

Selection is deterministic: pool order breaks every tie.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional

from loguru import logger

from readprep.models import Difficulty, Genre, PracticeItem
from readprep.selection.policy import SelectionPolicy


@dataclass
class SelectionStats:
    """Read-only summary of a selection, used to preview session quality."""
    total_items: int = 0
    unique_passage_count: int = 0
    passage_diversity_percent: int = 0
    genre_distribution: dict[str, int] = field(default_factory=dict)
    difficulty_distribution: dict[str, int] = field(
        default_factory=lambda: {d.value: 0 for d in Difficulty}
    )

    def meets_policy(self, policy: SelectionPolicy) -> bool:
        """Whether the unique-passage target of ``policy`` was honoured."""
        if self.total_items == 0:
            return policy.min_unique_passage_percent == 0
        return self.unique_passage_count * 100 >= policy.min_unique_passage_percent * self.total_items


@dataclass
class _SelectionState:
    """Mutable bookkeeping for one select() call."""
    policy: SelectionPolicy
    selected: list[PracticeItem] = field(default_factory=list)
    selected_ids: set[str] = field(default_factory=set)
    passage_counts: Counter = field(default_factory=Counter)
    genre_counts: Counter = field(default_factory=Counter)

    def is_eligible(self, item: PracticeItem) -> bool:
        return (
            item.id not in self.selected_ids
            and self.passage_counts[item.passage_id] < self.policy.max_items_per_passage
        )

    @property
    def wants_fresh_passage(self) -> bool:
        return len(self.passage_counts) < self.policy.min_unique_passages

    def take(self, item: PracticeItem) -> None:
        self.selected.append(item)
        self.selected_ids.add(item.id)
        self.passage_counts[item.passage_id] += 1
        self.genre_counts[item.genre] += 1


class SelectionEngine:
    """
    Select a diversified subset of practice items.

    Usage:
        engine = SelectionEngine()
        session = engine.select(pool, EXAM_SELECTION_POLICY)
        stats = engine.stats(session)
        if not stats.meets_policy(EXAM_SELECTION_POLICY):
            ...  # ask the learner to import more passages
    """

    def select(self, pool: Iterable[PracticeItem], policy: SelectionPolicy) -> list[PracticeItem]:
        """
        Select at most ``policy.target_count`` items.

        Args:
            pool: All available items (duplicate ids are taken once)
            policy: Selection constraints

        Returns:
            Selected items, quota pass first (easy, medium, hard) then backfill
        """
        items = self._dedupe(pool)
        state = _SelectionState(policy=policy)
        if policy.target_count == 0 or not items:
            return []

        quotas = policy.difficulty_distribution.quotas(policy.target_count)
        for difficulty in Difficulty:
            bucket = [item for item in items if item.difficulty == difficulty]
            taken = self._fill(bucket, quotas[difficulty], state)
            if taken < quotas[difficulty]:
                logger.debug(
                    f"Bucket '{difficulty.value}' short by {quotas[difficulty] - taken} "
                    f"({len(bucket)} items in pool)"
                )

        remaining = policy.target_count - len(state.selected)
        if remaining > 0:
            leftovers = [item for item in items if item.id not in state.selected_ids]
            backfilled = self._fill(leftovers, remaining, state)
            logger.debug(f"Backfilled {backfilled}/{remaining} slots from other buckets")

        stats = self.stats(state.selected)
        if stats.total_items < policy.target_count:
            logger.warning(
                f"Selected {stats.total_items}/{policy.target_count} items: pool exhausted"
            )
        if not stats.meets_policy(policy):
            logger.warning(
                f"Passage diversity {stats.passage_diversity_percent}% below target "
                f"{policy.min_unique_passage_percent}% ({stats.unique_passage_count} unique passages)"
            )
        logger.info(
            f"Selected {stats.total_items} items from pool of {len(items)}: "
            f"{stats.difficulty_distribution}, {stats.unique_passage_count} passages"
        )
        return state.selected

    @staticmethod
    def stats(selected: Iterable[PracticeItem]) -> SelectionStats:
        """
        Aggregate a selection (pure, no side effects).

        Args:
            selected: Items returned by select() or any candidate session

        Returns:
            SelectionStats with passage diversity and genre/difficulty counts
        """
        items = list(selected)
        total = len(items)
        unique = len({item.passage_id for item in items})

        genre_distribution: dict[str, int] = {}
        difficulty_distribution = {d.value: 0 for d in Difficulty}
        for item in items:
            genre = Genre(item.genre).value
            genre_distribution[genre] = genre_distribution.get(genre, 0) + 1
            difficulty_distribution[Difficulty(item.difficulty).value] += 1

        return SelectionStats(
            total_items=total,
            unique_passage_count=unique,
            # Half-up rounding to a whole percent
            passage_diversity_percent=(200 * unique + total) // (2 * total) if total else 0,
            genre_distribution=genre_distribution,
            difficulty_distribution=difficulty_distribution,
        )

    # =========================================================================
    # Internals
    # =========================================================================

    @staticmethod
    def _dedupe(pool: Iterable[PracticeItem]) -> list[PracticeItem]:
        seen: set[str] = set()
        items = []
        for item in pool:
            if item.id not in seen:
                seen.add(item.id)
                items.append(item)
        return items

    def _fill(self, candidates: list[PracticeItem], quota: int, state: _SelectionState) -> int:
        """Take up to ``quota`` items from ``candidates``; returns the number taken."""
        if quota <= 0:
            return 0
        if state.policy.enforce_genre_diversity:
            return self._fill_round_robin(candidates, quota, state)

        remaining = list(candidates)
        taken = 0
        while taken < quota:
            item = self._pick(remaining, state)
            if item is None:
                break
            state.take(item)
            remaining.remove(item)
            taken += 1
        return taken

    def _fill_round_robin(self, candidates: list[PracticeItem], quota: int, state: _SelectionState) -> int:
        """Visit genres in rounds, one item per genre per round, least-used genre first."""
        by_genre: dict[Genre, list[PracticeItem]] = {}
        for item in candidates:
            by_genre.setdefault(item.genre, []).append(item)
        first_seen = {genre: i for i, genre in enumerate(by_genre)}

        taken = 0
        while taken < quota:
            round_order = sorted(by_genre, key=lambda g: (state.genre_counts[g], first_seen[g]))
            progressed = False
            for genre in round_order:
                if taken >= quota:
                    break
                item = self._pick(by_genre[genre], state)
                if item is None:
                    continue
                state.take(item)
                by_genre[genre].remove(item)
                taken += 1
                progressed = True
            if not progressed:
                break
        return taken

    @staticmethod
    def _pick(items: list[PracticeItem], state: _SelectionState) -> Optional[PracticeItem]:
        """First eligible item, preferring unused passages while uniqueness is short."""
        fallback = None
        for item in items:
            if not state.is_eligible(item):
                continue
            if not state.wants_fresh_passage or state.passage_counts[item.passage_id] == 0:
                return item
            if fallback is None:
                fallback = item
        return fallback


def select_items(pool: Iterable[PracticeItem], policy: SelectionPolicy) -> list[PracticeItem]:
    """Convenience function using a default engine."""
    return SelectionEngine().select(pool, policy)
