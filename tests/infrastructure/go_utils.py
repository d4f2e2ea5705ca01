"""
Helpers for building syntax nodes from Go snippets.
"""

from __future__ import annotations

import textwrap
from typing import List, Optional, Sequence

from ctxweaver.config import CarrierRegistry
from ctxweaver.golang import parse_file, parse_statements
from ctxweaver.processor import ProcessOptions, Processor
from ctxweaver.results import FileResult
from ctxweaver.syntax import BlockStmt, Node
from ctxweaver.template import StatementTemplate

DEFAULT_TEMPLATE = 'defer trace.Start({{ ctx }}, {{ func_name | quote }}).End()'
DEFAULT_IMPORTS = ["github.com/example/trace"]


def func_file(body: str, imports: Sequence[str] = ("context",)) -> str:
    """Go file with one `func Handle(ctx context.Context)` whose body is `body`."""
    lines = ["package svc", ""]
    for path in imports:
        lines.append(f'import "{path}"')
    if imports:
        lines.append("")
    lines.append("func Handle(ctx context.Context) {")
    body = textwrap.dedent(body).strip("\n")
    if body:
        lines.append(textwrap.indent(body, "\t", lambda line: bool(line.strip())))
    lines.append("}")
    return "\n".join(lines) + "\n"


def block_of(body: str) -> BlockStmt:
    """Parse statements as the body of a function and return the block."""
    return parse_file(func_file(body)).funcs[0].body


def candidate(text: str) -> List[Node]:
    return parse_statements(textwrap.dedent(text).strip())


def stmt(text: str) -> Node:
    nodes = candidate(text)
    assert len(nodes) == 1, f"expected one statement, got {len(nodes)}"
    return nodes[0]


def transform(
    source: str,
    template: str = DEFAULT_TEMPLATE,
    imports: Optional[Sequence[str]] = None,
    package_path: str = "example.com/svc",
    **options,
) -> FileResult:
    """Run a Processor with default carriers over one source text."""
    processor = Processor(
        CarrierRegistry.with_defaults(),
        StatementTemplate.parse(template),
        DEFAULT_IMPORTS if imports is None else imports,
        ProcessOptions(**options),
    )
    return processor.transform_source(textwrap.dedent(source).lstrip("\n"), package_path)
