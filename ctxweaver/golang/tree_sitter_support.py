"""
Tree-sitter infrastructure for the Go loader: grammar loading and compiled
query cache shared by every parsed document.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List, Tuple

import tree_sitter_go as tsgo
from tree_sitter import Language, Node, Parser, Query, QueryCursor, Tree

from .queries import QUERIES


@lru_cache(maxsize=1)
def go_language() -> Language:
    return Language(tsgo.language())


@lru_cache(maxsize=None)
def compiled_query(query_name: str) -> Query:
    """
    Compile a named query from QUERIES once per process.

    Raises:
        ValueError: If the query is not defined.
    """
    if query_name not in QUERIES:
        raise ValueError(f"Unknown query: {query_name}")
    return Query(go_language(), QUERIES[query_name])


def parse_go(source: bytes) -> Tree:
    return Parser(go_language()).parse(source)


def run_query(query_name: str, root: Node) -> List[Tuple[Node, str]]:
    """
    Execute a named query under `root`.

    Returns:
        List of (node, capture_name) tuples in document order
    """
    cursor = QueryCursor(compiled_query(query_name))
    results = []
    for _pattern_index, captures in cursor.matches(root):
        for capture_name, nodes in captures.items():
            for node in nodes:
                results.append((node, capture_name))

    results.sort(key=lambda item: item[0].start_byte)
    return results


__all__ = ["go_language", "compiled_query", "parse_go", "run_query"]
