"""
SM-2 Review Scheduler for Missed Items.

Items answered incorrectly in a practice session are registered for review
and rescheduled with SuperMemo 2 after every review grade. The scheduler
never reads the clock: ``today`` is always supplied by the caller, and
record lists are never mutated (every operation returns a new list).

SM-2 Grade Scale:
0 - Complete blackout, wrong response
1 - Incorrect, but upon seeing answer remembered
2 - Incorrect, but answer seemed easy to recall
3 - Correct, but with significant difficulty
4 - Correct, with some hesitation
5 - Correct, with perfect recall
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Iterable

from loguru import logger

from .state_store import ReviewRecord


def _round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (6.5 -> 7)."""
    return math.floor(value + 0.5)

# =============================================================================
# SM-2 Algorithm
# =============================================================================


@dataclass
class SM2Config:
    """Configuration for SM-2 algorithm."""

    initial_easiness: float = 2.5
    minimum_easiness: float = 1.3
    first_interval: int = 1  # Days for first review
    second_interval: int = 6  # Days for second review
    failure_penalty: float = 0.2  # Ease lost on a failed review


@dataclass
class ReviewQueueStats:
    """Summary of a review queue on a given day."""

    total: int = 0
    due: int = 0
    average_interval: float = 0.0


class ReviewScheduler:
    """
    Implements the SM-2 spaced repetition algorithm over ReviewRecords.

    Each record has:
    - Ease Factor (EF): How easy the item is (2.5 default, min 1.3)
    - Interval: Days until next review
    - Repetitions: Consecutive correct recalls
    """

    def __init__(self, config: SM2Config | None = None):
        """
        Initialize SM-2 scheduler.

        Args:
            config: Custom configuration (uses defaults if None)
        """
        self.config = config or SM2Config()

    # =========================================================================
    # Registration
    # =========================================================================

    def register(
        self,
        item_id: str,
        source_session_id: str,
        today: date,
        existing: ReviewRecord | None = None,
    ) -> ReviewRecord:
        """
        Create a review record for a missed item, due today.

        An ``existing`` record is returned unchanged so that missing the
        same item twice does not reset its schedule.
        """
        if existing is not None:
            return existing
        return ReviewRecord(
            item_id=item_id,
            source_session_id=source_session_id,
            interval_days=self.config.first_interval,
            ease_factor=self.config.initial_easiness,
            repetition_count=0,
            next_review_date=today,
            last_review_date=None,
        )

    def register_missed(
        self,
        records: Iterable[ReviewRecord],
        item_ids: Iterable[str],
        session_id: str,
        today: date,
    ) -> list[ReviewRecord]:
        """Register every missed item of a session; known items are left untouched."""
        updated = list(records)
        known = {record.item_id for record in updated}
        added = 0
        for item_id in item_ids:
            if item_id in known:
                continue
            updated.append(self.register(item_id, session_id, today))
            known.add(item_id)
            added += 1

        logger.debug(f"Registered {added} missed items from session {session_id}")
        return updated

    # =========================================================================
    # Grading
    # =========================================================================

    def grade(self, record: ReviewRecord, grade: int, today: date) -> ReviewRecord:
        """
        Calculate the next review after a grade.

        Args:
            record: Current state for the item
            grade: Review grade (0-5)
            today: Date of the review

        Returns:
            New ReviewRecord with updated interval, ease and next review date

        Raises:
            ValueError: If grade is not an integer within 0-5
        """
        if isinstance(grade, bool) or not isinstance(grade, int) or not 0 <= grade <= 5:
            raise ValueError(f"Grade must be an integer 0-5, got {grade!r}")

        if grade < 3:
            # Failed - reset to beginning
            new_ease = max(
                self.config.minimum_easiness,
                record.ease_factor - self.config.failure_penalty,
            )
            new_repetitions = 0
            new_interval = self.config.first_interval
        else:
            # Interval grows with the ease held before this grade
            if record.repetition_count == 0:
                new_interval = self.config.first_interval
            elif record.repetition_count == 1:
                new_interval = self.config.second_interval
            else:
                new_interval = max(1, _round_half_up(record.interval_days * record.ease_factor))

            # EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
            ef_delta = 0.1 - (5 - grade) * (0.08 + (5 - grade) * 0.02)
            new_ease = max(self.config.minimum_easiness, record.ease_factor + ef_delta)
            new_repetitions = record.repetition_count + 1

        logger.debug(
            f"{record.item_id}: grade {grade}, interval {record.interval_days} -> {new_interval}, "
            f"ease {record.ease_factor:.2f} -> {new_ease:.2f}"
        )

        return replace(
            record,
            interval_days=new_interval,
            ease_factor=new_ease,
            repetition_count=new_repetitions,
            next_review_date=today + timedelta(days=new_interval),
            last_review_date=today,
        )

    def grade_item(
        self,
        records: Iterable[ReviewRecord],
        item_id: str,
        grade: int,
        today: date,
    ) -> tuple[list[ReviewRecord], ReviewRecord]:
        """
        Grade one item of a queue.

        Returns:
            (new list with the item's record replaced, the updated record)

        Raises:
            KeyError: If ``item_id`` is not registered
        """
        updated = list(records)
        for i, record in enumerate(updated):
            if record.item_id == item_id:
                graded = self.grade(record, grade, today)
                updated[i] = graded
                return updated, graded
        raise KeyError(item_id)

    def grade_from_response(
        self,
        is_correct: bool,
        response_ms: int,
        expected_ms: int = 10000,
    ) -> int:
        """
        Convert a response to an SM-2 grade.

        Args:
            is_correct: Whether the answer was correct
            response_ms: Time taken to respond
            expected_ms: Expected response time

        Returns:
            Grade 0-5
        """
        if not is_correct:
            # Incorrect responses: 0-2
            if response_ms < expected_ms * 0.5:
                return 2  # Quick wrong = almost knew it
            elif response_ms < expected_ms:
                return 1
            else:
                return 0

        # Correct responses: 3-5
        if response_ms < expected_ms * 0.5:
            return 5
        elif response_ms < expected_ms:
            return 4
        else:
            return 3

    # =========================================================================
    # Queue Operations
    # =========================================================================

    def due_today(self, records: Iterable[ReviewRecord], today: date) -> list[ReviewRecord]:
        """Records due on or before ``today``, most overdue first."""
        due = [record for record in records if record.is_due(today)]
        return sorted(due, key=lambda r: r.next_review_date or date.min)

    def remove(self, records: Iterable[ReviewRecord], item_id: str) -> list[ReviewRecord]:
        """Drop an item from the queue; unknown ids are ignored."""
        return [record for record in records if record.item_id != item_id]

    def queue_stats(self, records: Iterable[ReviewRecord], today: date) -> ReviewQueueStats:
        records = list(records)
        if not records:
            return ReviewQueueStats()
        return ReviewQueueStats(
            total=len(records),
            due=sum(1 for record in records if record.is_due(today)),
            average_interval=sum(r.interval_days for r in records) / len(records),
        )
