"""
Go source loading: files into GoFile descriptions, template text into
candidate statements.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from tree_sitter import Node as TSNode

from ..errors import CandidateParseError, EmptyCandidateError
from ..syntax.nodes import BlockStmt, Field, Node
from .convert import Converter, named
from .document import GoDocument
from .range_edits import RangeEditor

logger = logging.getLogger(__name__)

_MAJOR_VERSION_RE = re.compile(r"^v\d+$")
_GOPKG_VERSION_RE = re.compile(r"\.v\d+$")


def import_local_name(path: str) -> str:
    """
    Default package name for an import path.

    The last path segment is used, skipping a `vN` major-version suffix
    (`github.com/labstack/echo/v4` -> `echo`) and stripping a gopkg-style
    `.vN` suffix (`gopkg.in/yaml.v3` -> `yaml`).
    """
    parts = [p for p in path.split("/") if p]
    if not parts:
        return ""
    name = parts[-1]
    if _MAJOR_VERSION_RE.match(name) and len(parts) > 1:
        name = parts[-2]
    return _GOPKG_VERSION_RE.sub("", name)


@dataclass
class ImportSpec:
    path: str
    name: Optional[str] = None  # explicit alias, "_" or "."

    @property
    def local_name(self) -> Optional[str]:
        """Name the package is referenced by, None for blank and dot imports."""
        if self.name in ("_", "."):
            return None
        return self.name or import_local_name(self.path)


@dataclass
class Receiver:
    name: str          # "" when the receiver is unnamed
    type_name: str
    pointer: bool = False
    generic: bool = False


@dataclass
class FuncDecl:
    name: str
    params: List[Field]
    body: BlockStmt
    body_start: int    # char offsets of the `{ ... }` block
    body_end: int
    indent: str        # indentation of the `func` line
    line: int = 0      # 1-based line of the declaration
    comments: List[str] = field(default_factory=list)
    receiver: Optional[Receiver] = None
    generic: bool = False

    @property
    def is_method(self) -> bool:
        return self.receiver is not None

    @property
    def is_exported(self) -> bool:
        return self.name[:1].isupper()


@dataclass
class GoFile:
    text: str
    package_name: str
    imports: List[ImportSpec] = field(default_factory=list)
    funcs: List[FuncDecl] = field(default_factory=list)
    header_comments: List[str] = field(default_factory=list)

    @property
    def aliases(self) -> Dict[str, str]:
        """Local package name -> import path."""
        out: Dict[str, str] = {}
        for spec in self.imports:
            local = spec.local_name
            if local:
                out[local] = spec.path
        return out


def _unquote(literal: str) -> str:
    return literal[1:-1] if len(literal) >= 2 else literal


def read_imports(doc: GoDocument) -> List[ImportSpec]:
    specs: List[ImportSpec] = []
    for node in doc.query_nodes("imports", "import"):
        path_node = node.child_by_field_name("path")
        name_node = node.child_by_field_name("name")
        if path_node is None:
            continue
        specs.append(ImportSpec(
            path=_unquote(doc.get_node_text(path_node)),
            name=doc.get_node_text(name_node) if name_node is not None else None,
        ))
    return specs


def _preceding_comments(doc: GoDocument, node: TSNode) -> List[str]:
    """Comment group directly above a top-level node (no blank line in between)."""
    out: List[str] = []
    expected_row = node.start_point[0] - 1
    sibling = node.prev_named_sibling
    while sibling is not None and sibling.type == "comment" and sibling.end_point[0] == expected_row:
        out.append(doc.get_node_text(sibling))
        expected_row = sibling.start_point[0] - 1
        sibling = sibling.prev_named_sibling
    out.reverse()
    return out


def _header_comments(doc: GoDocument) -> List[str]:
    """Comments before the package clause."""
    out: List[str] = []
    for child in doc.root_node.children:
        if child.type == "package_clause":
            break
        if child.type == "comment":
            out.append(doc.get_node_text(child))
    return out


def _receiver(doc: GoDocument, params: TSNode) -> Optional[Receiver]:
    decls = named(params)
    if not decls:
        return None
    decl = decls[0]
    name_node = decl.child_by_field_name("name")
    typ = decl.child_by_field_name("type")

    pointer = False
    if typ is not None and typ.type == "pointer_type":
        pointer = True
        typ = named(typ)[0]
    generic = False
    if typ is not None and typ.type == "generic_type":
        generic = True
        typ = typ.child_by_field_name("type")

    return Receiver(
        name=doc.get_node_text(name_node) if name_node is not None else "",
        type_name=doc.get_node_text(typ) if typ is not None else "",
        pointer=pointer,
        generic=generic,
    )


def _func_decl(doc: GoDocument, conv: Converter, node: TSNode) -> FuncDecl:
    body_node = node.child_by_field_name("body")
    params = node.child_by_field_name("parameters")
    receiver = None
    if node.type == "method_declaration":
        receiver = _receiver(doc, node.child_by_field_name("receiver"))

    start, end = doc.get_node_range(body_node)
    return FuncDecl(
        name=doc.get_node_text(node.child_by_field_name("name")),
        params=conv.field_list(params).fields if params is not None else [],
        body=conv.body(body_node),
        body_start=start,
        body_end=end,
        indent=doc.get_line_indent(node.start_point[0]),
        line=node.start_point[0] + 1,
        comments=_preceding_comments(doc, node),
        receiver=receiver,
        generic=node.child_by_field_name("type_parameters") is not None,
    )


def parse_file(text: str) -> GoFile:
    """
    Parse a Go source file.

    Syntax errors do not abort loading: tree-sitter recovers locally and
    functions outside the damaged region are still reported.
    """
    doc = GoDocument(text)
    if doc.has_error():
        logger.debug("syntax errors in Go source; continuing with recovered tree")

    package_name = ""
    for clause in doc.get_children_by_type(doc.root_node, "package_clause"):
        ident = named(clause)
        if ident:
            package_name = doc.get_node_text(ident[0])

    imports = read_imports(doc)
    gofile = GoFile(
        text=text,
        package_name=package_name,
        imports=imports,
        header_comments=_header_comments(doc),
    )

    conv = Converter(doc, gofile.aliases)
    for node in doc.query_nodes("functions", "function"):
        if node.has_error:
            logger.debug("skipping function with syntax errors at line %d", node.start_point[0] + 1)
            continue
        gofile.funcs.append(_func_decl(doc, conv, node))
    return gofile


_WRAP_HEAD = "package p\nfunc f() {\n"
_WRAP_TAIL = "\n}"


def requalify_statements(text: str, renames: Dict[str, str]) -> str:
    """
    Rewrite package qualifiers in rendered statements, e.g. `trace.Start` to
    `tr.Start` when the file imports the package as `tr`.

    Text that does not parse is returned unchanged; parse_statements reports it.
    """
    if not renames:
        return text
    doc = GoDocument(_WRAP_HEAD + text + _WRAP_TAIL)
    if doc.has_error():
        return text
    editor = RangeEditor(doc.text)
    for node in doc.query_nodes("package_refs", "package"):
        local = renames.get(doc.get_node_text(node))
        if local is not None:
            start, end = doc.get_node_range(node)
            editor.add_replacement(start, end, local, "qualifier")
    out = editor.apply_edits()[0]
    return out[len(_WRAP_HEAD):len(out) - len(_WRAP_TAIL)]


def parse_statements(text: str) -> List[Node]:
    """
    Parse rendered template text into candidate statements.

    Comments after the last statement are attached to its footer.

    Raises:
        CandidateParseError: The text is not a valid statement sequence.
        EmptyCandidateError: The text contains no statements.
    """
    doc = GoDocument(_WRAP_HEAD + text + _WRAP_TAIL)
    if doc.has_error():
        raise CandidateParseError(f"failed to parse rendered statements:\n{text}", text)

    funcs = doc.get_children_by_type(doc.root_node, "function_declaration")
    others = [c for c in named(doc.root_node) if c.type not in ("package_clause", "function_declaration")]
    if len(funcs) != 1 or others:
        raise CandidateParseError(f"rendered text is not a statement sequence:\n{text}", text)

    block = Converter(doc).body(funcs[0].child_by_field_name("body"))
    if not block.stmts:
        raise EmptyCandidateError("template rendered no statements", text)

    last = block.stmts[-1]
    if block.trivia.footer:
        last.trivia.footer.extend(block.trivia.footer)
    return block.stmts


__all__ = [
    "ImportSpec",
    "Receiver",
    "FuncDecl",
    "GoFile",
    "import_local_name",
    "read_imports",
    "parse_file",
    "parse_statements",
    "requalify_statements",
]
