"""
In-place statement list mutations with trivia carried across the edited range.
"""

from __future__ import annotations

import copy
from typing import List, Sequence

from ..syntax.nodes import BlockStmt, Node


def _clone(candidate: Sequence[Node]) -> List[Node]:
    return [copy.deepcopy(n) for n in candidate]


def _in_bounds(block: BlockStmt, at: int, count: int) -> bool:
    return at >= 0 and count > 0 and at + count <= len(block.stmts)


def insert_front(block: BlockStmt, candidate: Sequence[Node]) -> bool:
    """
    Splice the candidate at the top of the block.

    The last inserted statement is followed by a blank line; statements already
    in the block are left untouched.
    """
    if not candidate:
        return False
    nodes = _clone(candidate)
    nodes[-1].trivia.blank_after = True
    block.stmts[0:0] = nodes
    return True


def replace_range(block: BlockStmt, at: int, count: int, candidate: Sequence[Node]) -> bool:
    """
    Replace `count` statements starting at `at` with the candidate.

    Returns False without touching the block when the range is out of bounds.
    """
    if not candidate or not _in_bounds(block, at, count):
        return False

    nodes = _clone(candidate)
    old_first = block.stmts[at]
    old_last = block.stmts[at + count - 1]
    first, last = nodes[0], nodes[-1]

    first.trivia.blank_before = old_first.trivia.blank_before
    if not first.trivia.leading:
        first.trivia.leading = list(old_first.trivia.leading)

    last.trivia.blank_after = old_last.trivia.blank_after
    if not last.trivia.trailing and not last.trivia.footer:
        last.trivia.trailing = list(old_last.trivia.trailing)
        last.trivia.footer = list(old_last.trivia.footer)

    block.stmts[at:at + count] = nodes
    return True


def remove_range(block: BlockStmt, at: int, count: int) -> bool:
    """Delete `count` statements starting at `at`. Out of bounds => False, no change."""
    if not _in_bounds(block, at, count):
        return False
    del block.stmts[at:at + count]
    return True


__all__ = ["insert_front", "replace_range", "remove_range"]
