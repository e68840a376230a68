"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from readprep.models import Difficulty, Genre, PracticeItem  # noqa: E402

# Ten sentences, 168 words, no digits, quotes or boilerplate
PROSE = (
    "The old lighthouse stood at the edge of the rocky harbor for nearly two hundred years. "
    "Sailors returning from long voyages looked for its steady beam because it promised "
    "safety after weeks of uncertain weather. "
    "When the keeper retired, however, the town council debated whether the building "
    "should be restored or demolished. "
    "Many residents argued that the tower belonged to the history of the coast and "
    "deserved careful protection. "
    "Others pointed out that modern ships relied on satellite navigation and no longer "
    "needed a light on the cliffs. "
    "Meanwhile, the paint continued to peel and the iron railings slowly rusted in the salty wind. "
    "Eventually the council reached a compromise that satisfied both sides of the long argument. "
    "They agreed to convert the keeper's cottage into a small museum while volunteers "
    "repaired the lamp room above it. "
    "Today visitors climb the narrow stairs and look across the water toward the distant islands. "
    "Since the restoration, the lighthouse has become a symbol of the patience that "
    "preservation often requires."
)
PROSE_WORDS = 168
PROSE_SENTENCE_WORDS = [16, 19, 17, 17, 19, 16, 14, 19, 15, 16]

GENRE_CYCLE = (Genre.LITERATURE, Genre.SCIENCE, Genre.HISTORY, Genre.SOCIAL_SCIENCE)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


def make_pool(
    passages: int = 50,
    items_per_passage: int = 2,
) -> list[PracticeItem]:
    """
    Items ``item-000``... over passages ``p-00``...

    Difficulty follows the item index (20% easy, 50% medium, 30% hard);
    genre cycles per passage.
    """
    pool = []
    for k in range(passages * items_per_passage):
        passage = k // items_per_passage
        if k % 10 < 2:
            difficulty = Difficulty.EASY
        elif k % 10 < 7:
            difficulty = Difficulty.MEDIUM
        else:
            difficulty = Difficulty.HARD
        pool.append(PracticeItem(
            id=f"item-{k:03d}",
            passage_id=f"p-{passage:02d}",
            difficulty=difficulty,
            genre=GENRE_CYCLE[passage % len(GENRE_CYCLE)],
        ))
    return pool


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def prose_text():
    """A well-formed expository passage that passes every quality check."""
    return PROSE


@pytest.fixture
def item_pool():
    """100 items over 50 passages, two per passage."""
    return make_pool()


@pytest.fixture
def pool_factory():
    """Build pools of other shapes: ``pool_factory(passages=3, items_per_passage=5)``."""
    return make_pool


@pytest.fixture
def sample_item_dicts():
    """Items as exported by the generation step (mixed key styles)."""
    return [
        {"id": "q1", "passageId": "p-01", "difficulty": "easy", "genre": "science"},
        {"id": "q2", "passage_id": "p-01", "difficulty": "hard", "genre": "science"},
        {"id": "q3", "passageId": "p-02", "difficulty": "medium", "genre": "history"},
    ]
