"""
Passage Library Selection.

Chooses which saved passages to send to item generation so that the
resulting pool follows the exam's genre mix, and summarizes the library.
Usage counts are supplied by the caller (the library itself is persisted
elsewhere).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from readprep.models import Genre, Passage
from readprep.processing import thresholds
from readprep.processing.genre import EXAM_GENRE_DISTRIBUTION


@dataclass
class LibraryStats:
    """Summary of a passage library."""
    total_passages: int = 0
    total_word_count: int = 0
    by_genre: dict[str, int] = field(default_factory=dict)
    average_usage: float = 0.0
    unused_count: int = 0
    potential_items: int = 0


def estimate_potential_items(passage_count: int) -> int:
    """Items a library can yield, at about three per passage."""
    return passage_count * thresholds.ITEMS_PER_PASSAGE_ESTIMATE


def library_stats(
    passages: Sequence[Passage],
    times_used: Optional[Mapping[str, int]] = None,
) -> LibraryStats:
    """Aggregate genre counts, word totals and usage."""
    usage = times_used or {}
    stats = LibraryStats(total_passages=len(passages))
    total_usage = 0

    for passage in passages:
        genre = Genre(passage.genre).value
        stats.by_genre[genre] = stats.by_genre.get(genre, 0) + 1
        stats.total_word_count += passage.word_count
        used = usage.get(passage.id, 0)
        total_usage += used
        if used == 0:
            stats.unused_count += 1

    stats.average_usage = total_usage / len(passages) if passages else 0.0
    stats.potential_items = estimate_potential_items(len(passages))
    return stats


def select_passages_by_genre(
    passages: Sequence[Passage],
    count: int,
    times_used: Optional[Mapping[str, int]] = None,
    distribution: Mapping[Genre, int] = EXAM_GENRE_DISTRIBUTION,
) -> list[Passage]:
    """
    Pick ``count`` passages following a genre distribution.

    First pass fills each genre's quota (rounded share of ``count``) with
    its least-used passages; second pass tops up from whatever is left,
    least-used first. Ties keep library order.
    """
    usage = times_used or {}
    selected: list[Passage] = []
    used_ids: set[str] = set()

    def by_usage(candidates: list[Passage]) -> list[Passage]:
        return sorted(candidates, key=lambda p: usage.get(p.id, 0))

    for genre, percentage in distribution.items():
        target = (count * percentage + 50) // 100
        if target <= 0:
            continue
        candidates = by_usage([
            p for p in passages if Genre(p.genre) == genre and p.id not in used_ids
        ])
        for passage in candidates[:min(target, count - len(selected))]:
            selected.append(passage)
            used_ids.add(passage.id)

    if len(selected) < count:
        for passage in by_usage([p for p in passages if p.id not in used_ids]):
            if len(selected) >= count:
                break
            selected.append(passage)
            used_ids.add(passage.id)

    return selected
