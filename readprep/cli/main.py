"""
readprep: developer CLI for the exam-practice core.

Commands:
- readprep ingest     - Clean, chunk and filter a source text into passages
- readprep select     - Select a practice session from an item pool
- readprep recommend  - Show the difficulty mix for an accuracy
- readprep review     - Manage the spaced-review queue of missed items
"""
from __future__ import annotations

import json
import sys
from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from readprep.config import get_settings
from readprep.models import Genre, Passage, PracticeItem, RawSource, SourceType
from readprep.processing.chunker import estimate_reading_time
from readprep.processing.pipeline import PassageIngestionPipeline
from readprep.selection.engine import SelectionStats
from readprep.selection.policy import SelectionPolicy
from readprep.selection.pool import load_pool
from readprep.selection.session import build_practice_session, build_review_session
from readprep.study.adaptive import AdaptiveDifficultyCalculator
from readprep.study.scheduler import ReviewScheduler
from readprep.study.state_store import ReviewRecord, SQLiteReviewRepository

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="readprep",
    help="Reading exam practice: passages, sessions and reviews",
    no_args_is_help=True,
)
review_app = typer.Typer(
    name="review",
    help="Spaced review of missed items (SM-2)",
    no_args_is_help=True,
)
app.add_typer(review_app, name="review")

console = Console()

DIFFICULTY_STYLES = {"easy": "green", "medium": "yellow", "hard": "red"}


# =============================================================================
# Helpers
# =============================================================================


def _parse_today(value: Optional[str]) -> date:
    if value is None:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[red]Invalid date (expected YYYY-MM-DD): {value}[/]")
        raise typer.Exit(1)


def _open_repository(db: Optional[Path]) -> SQLiteReviewRepository:
    return SQLiteReviewRepository(db or get_settings().review_db_path)


def _load_pool_or_exit(pool_json: Path) -> list[PracticeItem]:
    if not pool_json.exists():
        console.print(f"[red]File not found: {pool_json}[/]")
        raise typer.Exit(1)
    try:
        return load_pool(pool_json)
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON in {pool_json}: {e}[/]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Invalid item pool in {pool_json}: {e}[/]")
        raise typer.Exit(1)


def _passage_to_dict(passage: Passage) -> dict:
    return {
        "id": passage.id,
        "text": passage.text,
        "wordCount": passage.word_count,
        "sourceTitle": passage.source_title,
        "sourceAuthor": passage.source_author,
        "genre": Genre(passage.genre).value,
    }


def _print_selection_stats(stats: SelectionStats, policy: SelectionPolicy) -> None:
    table = Table(title="Session", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Items", f"{stats.total_items}/{policy.target_count}")
    table.add_row("Unique passages", str(stats.unique_passage_count))
    diversity_style = "green" if stats.meets_policy(policy) else "yellow"
    table.add_row(
        "Passage diversity",
        f"[{diversity_style}]{stats.passage_diversity_percent}%[/] "
        f"(target {policy.min_unique_passage_percent}%)",
    )
    for difficulty, count in stats.difficulty_distribution.items():
        color = DIFFICULTY_STYLES[difficulty]
        table.add_row(f"[{color}]{difficulty}[/]", str(count))
    for genre, count in sorted(stats.genre_distribution.items()):
        table.add_row(f"genre: {genre}", str(count))

    console.print(table)


def _print_records(records: list[ReviewRecord], today: date, title: str) -> None:
    table = Table(title=title)
    table.add_column("Item", style="cyan")
    table.add_column("Next", justify="right")
    table.add_column("Overdue", justify="right")
    table.add_column("Interval", justify="right")
    table.add_column("Ease", justify="right")
    table.add_column("Reps", justify="right")

    for record in records:
        table.add_row(
            record.item_id,
            record.next_review_date.isoformat() if record.next_review_date else "-",
            str(record.days_overdue(today)),
            f"{record.interval_days}d",
            f"{record.ease_factor:.2f}",
            str(record.repetition_count),
        )
    console.print(table)


# =============================================================================
# Passage Commands
# =============================================================================


@app.command("ingest")
def ingest(
    file_path: Annotated[Path, typer.Argument(help="Raw source text file")],
    source: Annotated[
        SourceType, typer.Option("--source", "-s", help="Source format")
    ] = SourceType.FILE,
    title: Annotated[str | None, typer.Option("--title", help="Source title")] = None,
    author: Annotated[str | None, typer.Option("--author", help="Source author")] = None,
    genre: Annotated[
        Genre | None, typer.Option("--genre", "-g", help="Genre (detected when omitted)")
    ] = None,
    category: Annotated[
        str | None, typer.Option("--category", help="Source category tag")
    ] = None,
    target_words: Annotated[
        int | None, typer.Option("--target-words", help="Preferred passage length")
    ] = None,
    output_json: Annotated[
        Path | None, typer.Option("--output-json", "-o", help="Write passages to JSON")
    ] = None,
) -> None:
    """
    Turn a raw text into exam-sized passages.

    Examples:
        readprep ingest pg1342.txt --source gutenberg --title "Pride and Prejudice"
        readprep ingest article.html --source guardian -o passages.json
    """
    if not file_path.exists():
        console.print(f"[red]File not found: {file_path}[/]")
        raise typer.Exit(1)

    raw = RawSource(
        text=file_path.read_text(encoding="utf-8", errors="replace"),
        source_type=source,
        title=title or file_path.stem,
        author=author,
        category=category,
    )
    pipeline = PassageIngestionPipeline.from_settings(get_settings())
    result = pipeline.ingest(raw, genre=genre, target_words=target_words)

    table = Table(title=f"Passages from {raw.title}")
    table.add_column("ID", style="cyan")
    table.add_column("Words", justify="right")
    table.add_column("Read", justify="right")
    table.add_column("Genre")
    table.add_column("Opening")
    for passage in result.passages:
        table.add_row(
            passage.id,
            str(passage.word_count),
            f"{estimate_reading_time(passage.text)}s",
            Genre(passage.genre).value,
            passage.text[:40] + "...",
        )
    console.print(table)

    summary = (
        f"Candidates: {result.candidates_seen}\n"
        f"Accepted:   [green]{len(result.passages)}[/] ({result.acceptance_rate:.0%})\n"
        f"Rejected:   [yellow]{result.rejected}[/]"
    )
    for reason, count in result.rejection_reasons.most_common():
        summary += f"\n  {reason}: {count}"
    console.print(Panel(summary, title="Ingestion", border_style="cyan"))

    if output_json:
        payload = [_passage_to_dict(p) for p in result.passages]
        output_json.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        console.print(f"[green]Wrote {len(payload)} passages to {output_json}[/]")


# =============================================================================
# Session Commands
# =============================================================================


@app.command("select")
def select(
    pool_json: Annotated[Path, typer.Argument(help="Item pool JSON file")],
    count: Annotated[
        int | None, typer.Option("--count", "-n", help="Items to select")
    ] = None,
    max_per_passage: Annotated[
        int | None, typer.Option("--max-per-passage", help="Cap on items per passage")
    ] = None,
    accuracy: Annotated[
        float | None, typer.Option("--accuracy", "-a", help="Recent accuracy for adaptive mix")
    ] = None,
    show_items: Annotated[
        bool, typer.Option("--show-items", help="List the selected items")
    ] = False,
) -> None:
    """
    Select a practice session from an item pool.
    """
    pool = _load_pool_or_exit(pool_json)

    settings = get_settings()
    try:
        policy = SelectionPolicy(
            target_count=count if count is not None else settings.session_target_count,
            max_items_per_passage=(
                max_per_passage if max_per_passage is not None else settings.max_items_per_passage
            ),
            min_unique_passage_percent=settings.min_unique_passage_percent,
            enforce_genre_diversity=settings.enforce_genre_diversity,
        )
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(1)

    session = build_practice_session(pool, accuracy=accuracy, policy=policy)
    _print_selection_stats(session.stats, session.policy)

    if show_items:
        table = Table(title="Items")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Item", style="cyan")
        table.add_column("Passage")
        table.add_column("Difficulty")
        for i, item in enumerate(session.items, 1):
            color = DIFFICULTY_STYLES[item.difficulty.value]
            table.add_row(str(i), item.id, item.passage_id, f"[{color}]{item.difficulty.value}[/]")
        console.print(table)

    if not session.meets_policy:
        console.print("[yellow]Passage diversity target not met: add more passages to the pool[/]")


@app.command("recommend")
def recommend(
    accuracy: Annotated[float, typer.Argument(help="Recent accuracy percent (0-100)")],
) -> None:
    """
    Show the recommended difficulty mix for an accuracy.
    """
    mix = AdaptiveDifficultyCalculator().recommend(accuracy)
    console.print(
        f"Accuracy {accuracy:g}% -> "
        f"[green]easy {mix.easy}%[/]  [yellow]medium {mix.medium}%[/]  [red]hard {mix.hard}%[/]"
    )


# =============================================================================
# Review Commands
# =============================================================================

DbOption = Annotated[Path | None, typer.Option("--db", help="Review database path")]
TodayOption = Annotated[
    str | None, typer.Option("--today", help="Override today's date (YYYY-MM-DD)")
]


@review_app.command("add")
def review_add(
    item_ids: Annotated[list[str], typer.Argument(help="Missed item IDs")],
    session_id: Annotated[
        str, typer.Option("--session", help="Practice session the items were missed in")
    ] = "manual",
    db: DbOption = None,
    today: TodayOption = None,
) -> None:
    """
    Register missed items for review.
    """
    day = _parse_today(today)
    scheduler = ReviewScheduler()
    with _open_repository(db) as repo:
        records = repo.load()
        updated = scheduler.register_missed(records, item_ids, session_id, day)
        repo.save(updated)

    console.print(f"[green]Registered {len(updated) - len(records)} items[/] ({len(updated)} in queue)")


@review_app.command("grade")
def review_grade(
    item_id: Annotated[str, typer.Argument(help="Item ID")],
    grade: Annotated[int, typer.Argument(help="SM-2 grade 0-5")],
    db: DbOption = None,
    today: TodayOption = None,
) -> None:
    """
    Grade a review and reschedule the item.
    """
    day = _parse_today(today)
    scheduler = ReviewScheduler()
    with _open_repository(db) as repo:
        try:
            records, record = scheduler.grade_item(repo.load(), item_id, grade, day)
        except KeyError:
            console.print(f"[red]Item not in review queue: {item_id}[/]")
            raise typer.Exit(1)
        except ValueError as e:
            console.print(f"[red]{e}[/]")
            raise typer.Exit(1)
        repo.save(records)

    style = "green" if grade >= 3 else "red"
    console.print(
        f"[{style}]{item_id}[/]: next review {record.next_review_date.isoformat()} "
        f"(interval {record.interval_days}d, ease {record.ease_factor:.2f})"
    )


@review_app.command("due")
def review_due(
    pool_json: Annotated[
        Path | None, typer.Option("--pool", help="Resolve due items against a pool")
    ] = None,
    db: DbOption = None,
    today: TodayOption = None,
) -> None:
    """
    List items due for review, most overdue first.
    """
    day = _parse_today(today)
    scheduler = ReviewScheduler()
    with _open_repository(db) as repo:
        records = repo.load()

    due = scheduler.due_today(records, day)
    if not due:
        console.print("[green]Nothing due today[/]")
        return

    if pool_json is None:
        _print_records(due, day, title=f"Due on {day.isoformat()}")
        return

    items = build_review_session(due, _load_pool_or_exit(pool_json), day, scheduler=scheduler)
    table = Table(title=f"Review session {day.isoformat()}")
    table.add_column("Item", style="cyan")
    table.add_column("Passage")
    table.add_column("Difficulty")
    for item in items:
        table.add_row(item.id, item.passage_id, item.difficulty.value)
    console.print(table)


@review_app.command("remove")
def review_remove(
    item_id: Annotated[str, typer.Argument(help="Item ID")],
    db: DbOption = None,
) -> None:
    """
    Remove an item from the review queue.
    """
    scheduler = ReviewScheduler()
    with _open_repository(db) as repo:
        records = repo.load()
        updated = scheduler.remove(records, item_id)
        if len(updated) == len(records):
            console.print(f"[yellow]Item not in review queue: {item_id}[/]")
            return
        repo.save(updated)
    console.print(f"[green]Removed {item_id}[/]")


@review_app.command("stats")
def review_stats(
    db: DbOption = None,
    today: TodayOption = None,
) -> None:
    """
    Show review queue statistics.
    """
    day = _parse_today(today)
    with _open_repository(db) as repo:
        stats = ReviewScheduler().queue_stats(repo.load(), day)

    table = Table(title="Review Queue", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total", str(stats.total))
    table.add_row("Due", str(stats.due))
    table.add_row("Average interval", f"{stats.average_interval:.1f}d")
    console.print(table)


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    settings = get_settings()

    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="10 MB")

    app()


if __name__ == "__main__":
    main()
