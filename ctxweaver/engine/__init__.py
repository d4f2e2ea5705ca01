from __future__ import annotations

from .comparator import MatchMode, Comparator, compare, matches_exact, matches_skeleton
from .detector import Action, Insert, Remove, Skip, Update, detect
from .directive import GENERATED_MARKER, SKIP_MARKER, has_decl_marker, has_marker, has_stmt_marker
from .mutator import insert_front, remove_range, replace_range

__all__ = [
    "MatchMode", "Comparator", "compare", "matches_exact", "matches_skeleton",
    "Action", "Insert", "Remove", "Skip", "Update", "detect",
    "GENERATED_MARKER", "SKIP_MARKER", "has_decl_marker", "has_marker", "has_stmt_marker",
    "insert_front", "remove_range", "replace_range",
]
