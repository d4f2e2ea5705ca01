"""
Printing of function bodies from the syntax node model.

Statements are emitted from their original source text, re-indented to the
target depth; only the layout between statements is produced here.
"""

from __future__ import annotations

from typing import List

from ..syntax.nodes import BlockStmt, Node


def reindent(source: str, origin: str, target: str) -> str:
    """Move continuation lines of `source` from the `origin` indent to `target`."""
    if origin == target or "\n" not in source:
        return source
    lines = source.split("\n")
    out = [lines[0]]
    for line in lines[1:]:
        if line.startswith(origin):
            out.append(target + line[len(origin):])
        else:
            out.append(line)
    return "\n".join(out)


def _comment_lines(comments: List[str], indent: str) -> List[str]:
    return [indent + c if c else "" for c in comments]


def render_stmt(stmt: Node, indent: str) -> List[str]:
    lines = _comment_lines(stmt.trivia.leading, indent)
    if not stmt.source:
        raise ValueError(f"{stmt.kind} has no source text to print")
    lines.append(indent + reindent(stmt.source, stmt.indent, indent) + "".join(stmt.trivia.trailing))
    lines.extend(_comment_lines(stmt.trivia.footer, indent))
    return lines


def render_block(block: BlockStmt, indent: str, closing_indent: str) -> str:
    """
    Render a function body including its braces.

    Args:
        block: Body to print.
        indent: Indentation of statements inside the body.
        closing_indent: Indentation of the closing brace line.

    Returns:
        Text from `{` to `}` inclusive.
    """
    lines = ["{" + "".join(block.trivia.leading)]

    for i, stmt in enumerate(block.stmts):
        if i > 0 and (block.stmts[i - 1].trivia.blank_after or stmt.trivia.blank_before):
            lines.append("")
        lines.extend(render_stmt(stmt, indent))

    if block.trivia.footer:
        if block.stmts and block.stmts[-1].trivia.blank_after:
            lines.append("")
        lines.extend(_comment_lines(block.trivia.footer, indent))

    lines.append(closing_indent + "}")
    return "\n".join(lines)


__all__ = ["reindent", "render_stmt", "render_block"]
