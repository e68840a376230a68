"""
Session Assembly.

Glue between the pure components: a practice session is an adaptive policy
plus a selection, a review session is the due queue resolved against the
current item pool.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from loguru import logger

from readprep.models import PracticeItem
from readprep.selection.engine import SelectionEngine, SelectionStats
from readprep.selection.policy import EXAM_SELECTION_POLICY, SelectionPolicy
from readprep.study.adaptive import AdaptiveDifficultyCalculator
from readprep.study.scheduler import ReviewScheduler
from readprep.study.state_store import ReviewRecord


@dataclass
class PracticeSession:
    """A prepared practice session."""
    items: list[PracticeItem] = field(default_factory=list)
    policy: SelectionPolicy = EXAM_SELECTION_POLICY
    stats: SelectionStats = field(default_factory=SelectionStats)

    @property
    def total_items(self) -> int:
        return len(self.items)

    @property
    def meets_policy(self) -> bool:
        return self.stats.meets_policy(self.policy)


def build_practice_session(
    pool: Iterable[PracticeItem],
    accuracy: Optional[float] = None,
    policy: SelectionPolicy = EXAM_SELECTION_POLICY,
    engine: Optional[SelectionEngine] = None,
) -> PracticeSession:
    """
    Select a practice session from ``pool``.

    When ``accuracy`` (0-100) is given, the policy's difficulty mix is
    replaced by the adaptive recommendation for that accuracy.
    """
    engine = engine or SelectionEngine()
    if accuracy is not None:
        policy = AdaptiveDifficultyCalculator().policy_for(accuracy, base=policy)

    items = engine.select(pool, policy)
    return PracticeSession(items=items, policy=policy, stats=engine.stats(items))


def build_review_session(
    records: Iterable[ReviewRecord],
    pool: Iterable[PracticeItem],
    today: date,
    scheduler: Optional[ReviewScheduler] = None,
) -> list[PracticeItem]:
    """
    Items due for review on ``today``, most overdue first.

    Records whose item is no longer in the pool are skipped.
    """
    scheduler = scheduler or ReviewScheduler()
    by_id = {item.id: item for item in pool}

    items = []
    missing = 0
    for record in scheduler.due_today(records, today):
        item = by_id.get(record.item_id)
        if item is None:
            missing += 1
            continue
        items.append(item)

    if missing:
        logger.debug(f"{missing} due review items are no longer in the pool")
    logger.info(f"Review session for {today}: {len(items)} items")
    return items
