"""
Review State Storage.

Spaced-repetition records for missed practice items, and the repositories
that persist them. Persistence is an explicit load/compute/save cycle:

    records = repo.load()
    records, _ = scheduler.grade_item(records, item_id, 4, today)
    repo.save(records)

Database location for the SQLite repository: ~/.readprep/reviews.db
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Iterable, Protocol

from loguru import logger

# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class ReviewRecord:
    """SM-2 state for a single practice item."""

    item_id: str
    source_session_id: str
    interval_days: int = 1  # Days until next review
    ease_factor: float = 2.5  # EF starts at 2.5, never below 1.3
    repetition_count: int = 0  # Consecutive correct answers
    next_review_date: date | None = None
    last_review_date: date | None = None

    def is_due(self, today: date) -> bool:
        """Check if this item is due for review."""
        if self.next_review_date is None:
            return True
        return today >= self.next_review_date

    def days_overdue(self, today: date) -> int:
        """Days past the scheduled review date."""
        if self.next_review_date is None:
            return 0
        return max(0, (today - self.next_review_date).days)


# =============================================================================
# Repositories
# =============================================================================


class ReviewRepository(Protocol):
    """Anything that can load and save the full review queue."""

    def load(self) -> list[ReviewRecord]: ...

    def save(self, records: Iterable[ReviewRecord]) -> None: ...


class InMemoryReviewRepository:
    """Repository backed by a list; used in tests and one-off sessions."""

    def __init__(self, records: Iterable[ReviewRecord] = ()):
        self._records = list(records)

    def load(self) -> list[ReviewRecord]:
        return list(self._records)

    def save(self, records: Iterable[ReviewRecord]) -> None:
        self._records = list(records)


class SQLiteReviewRepository:
    """
    SQLite-backed review queue.

    ``save`` replaces the stored queue with the given records, so removals
    made by the scheduler are persisted too.
    """

    DEFAULT_DB_PATH = Path.home() / ".readprep" / "reviews.db"

    def __init__(self, db_path: Path | str | None = None):
        """
        Initialize the repository.

        Args:
            db_path: Custom database path (defaults to ~/.readprep/reviews.db)
        """
        self.db_path = Path(db_path) if db_path else self.DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn: sqlite3.Connection | None = None
        self._init_schema()

        logger.debug(f"SQLiteReviewRepository initialized at {self.db_path}")

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_schema(self) -> None:
        cursor = self.conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS review_records (
                item_id TEXT PRIMARY KEY,
                source_session_id TEXT NOT NULL,
                interval_days INTEGER DEFAULT 1,
                ease_factor REAL DEFAULT 2.5,
                repetition_count INTEGER DEFAULT 0,
                next_review_date TEXT,
                last_review_date TEXT
            )
        """)

        # Index for fast due-date queries
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_review_next_date
            ON review_records(next_review_date)
        """)
        self.conn.commit()

    def load(self) -> list[ReviewRecord]:
        """All stored records, ordered by next review date."""
        cursor = self.conn.cursor()
        cursor.execute("""
            SELECT * FROM review_records
            ORDER BY next_review_date ASC, item_id ASC
        """)
        return [self._row_to_record(row) for row in cursor.fetchall()]

    def save(self, records: Iterable[ReviewRecord]) -> None:
        """Replace the stored queue with ``records`` in one transaction."""
        rows = [
            (
                r.item_id,
                r.source_session_id,
                r.interval_days,
                r.ease_factor,
                r.repetition_count,
                r.next_review_date.isoformat() if r.next_review_date else None,
                r.last_review_date.isoformat() if r.last_review_date else None,
            )
            for r in records
        ]
        with self.conn:
            self.conn.execute("DELETE FROM review_records")
            self.conn.executemany(
                """
                INSERT INTO review_records (
                    item_id, source_session_id, interval_days, ease_factor,
                    repetition_count, next_review_date, last_review_date
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
                rows,
            )
        logger.debug(f"Saved {len(rows)} review records to {self.db_path}")

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> SQLiteReviewRepository:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> ReviewRecord:
        return ReviewRecord(
            item_id=row["item_id"],
            source_session_id=row["source_session_id"],
            interval_days=row["interval_days"],
            ease_factor=row["ease_factor"],
            repetition_count=row["repetition_count"],
            next_review_date=_parse_date(row["next_review_date"]),
            last_review_date=_parse_date(row["last_review_date"]),
        )


def _parse_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None
