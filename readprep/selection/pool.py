"""
Item Pool Loader.

Loads practice items exported by the generation step from JSON files.
Accepts both camelCase (``passageId``) and snake_case keys; items without a
passage id are keyed by their passage text, and items without a genre get
one detected from that text.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

from readprep.models import Difficulty, Genre, PracticeItem, passage_key
from readprep.processing.genre import detect_genre


def item_from_dict(data: dict[str, Any]) -> PracticeItem:
    """
    Create a PracticeItem from a dictionary (JSON).

    Args:
        data: Item dictionary; requires ``id`` and ``difficulty``

    Returns:
        PracticeItem instance

    Raises:
        ValueError: If the item has neither a passage id nor passage text,
            or an unknown difficulty/genre
    """
    passage_text = data.get("passage") or ""
    passage_id = data.get("passageId") or data.get("passage_id")
    if not passage_id:
        if not passage_text:
            raise ValueError(f"Item {data.get('id')!r} has no passage id or passage text")
        passage_id = passage_key(passage_text)

    genre = data.get("genre")
    if genre:
        genre = Genre(genre)
    else:
        source = data.get("passageSource") or data.get("passage_source")
        genre = detect_genre(passage_text, source) if passage_text else Genre.OTHER

    return PracticeItem(
        id=str(data["id"]),
        passage_id=str(passage_id),
        difficulty=Difficulty(data["difficulty"]),
        genre=genre,
    )


def item_to_dict(item: PracticeItem) -> dict[str, str]:
    return {
        "id": item.id,
        "passageId": item.passage_id,
        "difficulty": item.difficulty.value,
        "genre": Genre(item.genre).value,
    }


def load_pool(path: str | Path) -> list[PracticeItem]:
    """
    Load items from a JSON file.

    The file holds either a list of items or an object with an ``items``
    (or ``questions``) list. Malformed items are skipped with a warning.

    Raises:
        json.JSONDecodeError: If the file is not valid JSON
        ValueError: If the file holds no list of items
    """
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("items") or data.get("questions") or []
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of items, got {type(data).__name__}")

    items: list[PracticeItem] = []
    for raw in data:
        try:
            items.append(item_from_dict(raw))
        except (AttributeError, KeyError, ValueError) as e:
            logger.warning(f"Skipping malformed item in {path.name}: {e}")

    logger.info(f"Loaded {len(items)} items from {path}")
    return items
