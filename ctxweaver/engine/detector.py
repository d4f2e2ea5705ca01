"""
Window matcher and action detector.

Given a function body and a candidate statement sequence, decides whether the
candidate has to be inserted, refreshed, removed, or left alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..errors import BoundsError, EmptyCandidateError
from ..syntax.nodes import BlockStmt, Node
from .comparator import matches_exact, matches_skeleton
from .directive import SKIP_MARKER, has_stmt_marker
from .mutator import insert_front, remove_range, replace_range


class Action:
    """Outcome of detection. Subclasses know how to apply themselves to a block."""

    name: str = ""

    def apply(self, block: BlockStmt, candidate: Sequence[Node]) -> bool:
        """Mutate the block; returns True if it changed."""
        raise NotImplementedError


@dataclass(frozen=True)
class Skip(Action):
    name = "skip"

    def apply(self, block: BlockStmt, candidate: Sequence[Node]) -> bool:
        return False


@dataclass(frozen=True)
class Insert(Action):
    name = "insert"

    def apply(self, block: BlockStmt, candidate: Sequence[Node]) -> bool:
        return insert_front(block, candidate)


@dataclass(frozen=True)
class Update(Action):
    at: int
    count: int
    name = "update"

    def apply(self, block: BlockStmt, candidate: Sequence[Node]) -> bool:
        if not replace_range(block, self.at, self.count, candidate):
            raise BoundsError(f"update [{self.at}:{self.at + self.count}] outside block of {len(block.stmts)}")
        return True


@dataclass(frozen=True)
class Remove(Action):
    at: int
    count: int
    name = "remove"

    def apply(self, block: BlockStmt, candidate: Sequence[Node]) -> bool:
        if not remove_range(block, self.at, self.count):
            raise BoundsError(f"remove [{self.at}:{self.at + self.count}] outside block of {len(block.stmts)}")
        return True


def find_window(stmts: Sequence[Node], candidate: Sequence[Node]) -> Optional[int]:
    """Index of the first window skeleton-matching the candidate, or None."""
    n = len(candidate)
    for i in range(len(stmts) - n + 1):
        if all(matches_skeleton(stmts[i + j], candidate[j]) for j in range(n)):
            return i
    return None


def find_generated_run(stmts: Sequence[Node], marker: str) -> Optional[tuple[int, int]]:
    """First run of consecutive statements carrying the generated marker."""
    for i, stmt in enumerate(stmts):
        if has_stmt_marker(stmt, marker):
            end = i + 1
            while end < len(stmts) and has_stmt_marker(stmts[end], marker):
                end += 1
            return i, end - i
    return None


def detect(
    block: BlockStmt,
    candidate: Sequence[Node],
    remove: bool = False,
    marker: Optional[str] = SKIP_MARKER,
    generated_marker: Optional[str] = None,
) -> Action:
    """
    Classify what has to happen to `block` for `candidate`.

    Only the first matching window is considered. A skip directive on the
    window's first statement wins over every other outcome.

    Args:
        block: Function body.
        candidate: Parsed template statements.
        remove: Remove mode; matches are deleted instead of refreshed.
        marker: Skip directive text (None disables the guard).
        generated_marker: When set, a run of statements tagged with it is
            treated as the match if no skeleton window exists.

    Returns:
        One of Skip, Insert, Update, Remove.
    """
    if not candidate:
        raise EmptyCandidateError("template rendered no statements")

    stmts = block.stmts
    n = len(candidate)

    at = find_window(stmts, candidate)
    if at is not None:
        if has_stmt_marker(stmts[at], marker):
            return Skip()
        if remove:
            return Remove(at, n)
        if all(matches_exact(stmts[at + j], candidate[j]) for j in range(n)):
            return Skip()
        return Update(at, n)

    if generated_marker:
        run = find_generated_run(stmts, generated_marker)
        if run is not None:
            at, count = run
            if has_stmt_marker(stmts[at], marker):
                return Skip()
            return Remove(at, count) if remove else Update(at, count)

    return Skip() if remove else Insert()


__all__ = [
    "Action",
    "Skip",
    "Insert",
    "Update",
    "Remove",
    "find_window",
    "find_generated_run",
    "detect",
]
