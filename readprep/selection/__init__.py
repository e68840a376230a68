"""
Selection module for practice sessions.

Chooses diversified item sets from a generated pool and passage sets from
the library. Session assembly lives in ``readprep.selection.session``
because it depends on the study package.
"""

from .engine import SelectionEngine, SelectionStats, select_items
from .library import LibraryStats, library_stats, select_passages_by_genre
from .policy import EXAM_SELECTION_POLICY, DifficultyMix, SelectionPolicy
from .pool import item_from_dict, item_to_dict, load_pool

__all__ = [
    "DifficultyMix",
    "EXAM_SELECTION_POLICY",
    "LibraryStats",
    "SelectionEngine",
    "SelectionPolicy",
    "SelectionStats",
    "item_from_dict",
    "item_to_dict",
    "library_stats",
    "load_pool",
    "select_items",
    "select_passages_by_genre",
]
