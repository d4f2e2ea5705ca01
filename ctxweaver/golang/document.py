"""
Go document: tree-sitter parse of Go source text with offset helpers.

Tree-sitter reports byte offsets; the range editor works on characters, so
every range handed out by the document is converted first.
"""

from __future__ import annotations

import re
from typing import List, Tuple

from tree_sitter import Node

from .tree_sitter_support import parse_go, run_query

_INDENT_RE = re.compile(r"[ \t]*")


class GoDocument:

    def __init__(self, text: str):
        self.text = text
        self._text_bytes = text.encode("utf-8")
        self._lines = text.split("\n")
        self.tree = parse_go(self._text_bytes)

    @property
    def root_node(self) -> Node:
        return self.tree.root_node

    def has_error(self) -> bool:
        return self.root_node.has_error

    def query_nodes(self, query_name: str, capture_name: str) -> List[Node]:
        """Nodes of a named query captured under `capture_name`, in document order."""
        return [node for node, cap in run_query(query_name, self.root_node) if cap == capture_name]

    def get_node_text(self, node: Node) -> str:
        return self.get_text_between(node.start_byte, node.end_byte)

    def get_text_between(self, start_byte: int, end_byte: int) -> str:
        return self._text_bytes[start_byte:end_byte].decode("utf-8")

    def get_node_range(self, node: Node) -> Tuple[int, int]:
        """Char range for a node."""
        return self.byte_to_char_position(node.start_byte), self.byte_to_char_position(node.end_byte)

    def get_line_indent(self, row: int) -> str:
        """Leading whitespace of a 0-based line."""
        if row < 0 or row >= len(self._lines):
            return ""
        return _INDENT_RE.match(self._lines[row]).group(0)

    def line_start_char(self, row: int) -> int:
        """Character offset of the start of a 0-based line."""
        return min(sum(len(line) + 1 for line in self._lines[:row]), len(self.text))

    @staticmethod
    def get_children_by_type(node: Node, node_type: str) -> List[Node]:
        return [child for child in node.children if child.type == node_type]

    def byte_to_char_position(self, byte_pos: int) -> int:
        """
        Convert a byte position to a character position.
        A position inside a multi-byte character maps to the position before it.
        """
        if byte_pos <= 0:
            return 0
        if byte_pos >= len(self._text_bytes):
            return len(self.text)
        return len(self._text_bytes[:byte_pos].decode("utf-8", errors="ignore"))


__all__ = ["GoDocument"]
