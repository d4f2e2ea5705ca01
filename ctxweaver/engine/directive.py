"""
Directive guard: detection of `ctxweaver:skip` style markers in comments.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from ..syntax.nodes import Node

SKIP_MARKER = "ctxweaver:skip"
GENERATED_MARKER = "ctxweaver:generated"

# https://go.dev/s/generatedcode
_GENERATED_HEADER = re.compile(r"^// Code generated .* DO NOT EDIT\.$")


def comment_body(comment: str) -> str:
    """Comment text without `//`, `/* */` and surrounding whitespace."""
    text = comment.strip()
    if text.startswith("//"):
        text = text[2:]
    elif text.startswith("/*"):
        text = text[2:]
        if text.endswith("*/"):
            text = text[:-2]
    return text.strip()


def has_marker(comments: Iterable[str], marker: Optional[str] = SKIP_MARKER) -> bool:
    """True if any comment starts with the marker once comment syntax is stripped."""
    if not marker:
        return False
    return any(comment_body(c).startswith(marker) for c in comments)


def has_stmt_marker(node: Optional[Node], marker: Optional[str] = SKIP_MARKER) -> bool:
    """Check leading, trailing and footer comments of a statement."""
    if node is None:
        return False
    return has_marker(node.trivia.comments(), marker)


def is_generated_header(comments: Iterable[str]) -> bool:
    return any(_GENERATED_HEADER.match(c.strip()) for c in comments)


def has_decl_marker(
    comments: Iterable[str],
    marker: Optional[str] = SKIP_MARKER,
    *,
    file_scope: bool = False,
) -> bool:
    """
    Check declaration or file comments for the marker.

    At file scope the standard generated-code header also counts as a skip.
    """
    comments = list(comments)
    if has_marker(comments, marker):
        return True
    return file_scope and is_generated_header(comments)


__all__ = [
    "SKIP_MARKER",
    "GENERATED_MARKER",
    "comment_body",
    "has_marker",
    "has_stmt_marker",
    "has_decl_marker",
    "is_generated_header",
]
