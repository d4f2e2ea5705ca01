"""
Syntax node model for Go statements and expressions.

Nodes are plain dataclasses forming a closed set of kinds. Comments and
blank-line hints live in explicit Trivia fields instead of being derived from
source positions, so statements can be spliced between blocks without any
formatter machinery.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Trivia:
    """Non-semantic text attached to a node."""
    # Own-line comments above the node; "" marks a blank line inside the group
    leading: List[str] = field(default_factory=list)
    # Comments on the node's last line, each with the whitespace gap before it
    trailing: List[str] = field(default_factory=list)
    # Own-line comments directly after the node; "" marks a blank line
    footer: List[str] = field(default_factory=list)
    blank_before: bool = False
    blank_after: bool = False

    def comments(self) -> List[str]:
        return [c for c in (*self.leading, *self.trailing, *self.footer) if c.strip()]


@dataclass(eq=False)
class Node:
    """Base class of all syntax nodes."""
    trivia: Trivia = field(default_factory=Trivia, kw_only=True)
    # Original text and line indentation; set for block-level statements only
    source: str = field(default="", kw_only=True)
    indent: str = field(default="", kw_only=True)

    @property
    def kind(self) -> str:
        return type(self).__name__


# ---- Expressions ----

@dataclass(eq=False)
class Ident(Node):
    name: str
    # Import path the identifier was resolved to ("" when unresolved)
    path: str = ""


@dataclass(eq=False)
class BasicLit(Node):
    lit_kind: str  # STRING | INT | FLOAT | IMAG | CHAR
    value: str


@dataclass(eq=False)
class SelectorExpr(Node):
    x: Node
    sel: Ident


@dataclass(eq=False)
class CallExpr(Node):
    fun: Node
    args: List[Node] = field(default_factory=list)
    ellipsis: bool = False


@dataclass(eq=False)
class UnaryExpr(Node):
    op: str
    x: Node


@dataclass(eq=False)
class BinaryExpr(Node):
    op: str
    x: Node
    y: Node


@dataclass(eq=False)
class StarExpr(Node):
    x: Node


@dataclass(eq=False)
class ParenExpr(Node):
    x: Node


@dataclass(eq=False)
class IndexExpr(Node):
    x: Node
    indices: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class SliceExpr(Node):
    x: Node
    low: Optional[Node] = None
    high: Optional[Node] = None
    max: Optional[Node] = None


@dataclass(eq=False)
class TypeAssertExpr(Node):
    x: Node
    type: Optional[Node] = None  # None for x.(type)


@dataclass(eq=False)
class KeyValueExpr(Node):
    key: Node
    value: Node


@dataclass(eq=False)
class CompositeLit(Node):
    type: Optional[Node]
    elts: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class Variadic(Node):
    elt: Optional[Node] = None


@dataclass(eq=False)
class Field(Node):
    names: List[Ident] = field(default_factory=list)
    type: Optional[Node] = None


@dataclass(eq=False)
class FieldList(Node):
    fields: List[Field] = field(default_factory=list)


@dataclass(eq=False)
class FuncType(Node):
    params: FieldList
    results: Optional[FieldList] = None


@dataclass(eq=False)
class FuncLit(Node):
    type: FuncType
    body: BlockStmt


@dataclass(eq=False)
class Opaque(Node):
    """Construct without a dedicated kind, identified by its grammar type and text."""
    node_type: str
    text: str


# ---- Statements ----

@dataclass(eq=False)
class BlockStmt(Node):
    stmts: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class ExprStmt(Node):
    x: Node


@dataclass(eq=False)
class DeferStmt(Node):
    call: Node


@dataclass(eq=False)
class GoStmt(Node):
    call: Node


@dataclass(eq=False)
class AssignStmt(Node):
    tok: str
    lhs: List[Node] = field(default_factory=list)
    rhs: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class IncDecStmt(Node):
    x: Node
    tok: str


@dataclass(eq=False)
class ReturnStmt(Node):
    results: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class IfStmt(Node):
    init: Optional[Node]
    cond: Node
    body: BlockStmt
    else_: Optional[Node] = None


@dataclass(eq=False)
class ForStmt(Node):
    init: Optional[Node]
    cond: Optional[Node]
    post: Optional[Node]
    body: BlockStmt


@dataclass(eq=False)
class RangeStmt(Node):
    key: Optional[Node]
    value: Optional[Node]
    tok: str  # "", "=" or ":="
    x: Node
    body: BlockStmt


@dataclass(eq=False)
class CaseClause(Node):
    exprs: List[Node] = field(default_factory=list)  # empty for default
    body: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class SwitchStmt(Node):
    init: Optional[Node]
    tag: Optional[Node]
    body: BlockStmt


__all__ = [
    "Trivia", "Node",
    "Ident", "BasicLit", "SelectorExpr", "CallExpr", "UnaryExpr", "BinaryExpr",
    "StarExpr", "ParenExpr", "IndexExpr", "SliceExpr", "TypeAssertExpr",
    "KeyValueExpr", "CompositeLit", "Variadic", "Field", "FieldList",
    "FuncType", "FuncLit", "Opaque",
    "BlockStmt", "ExprStmt", "DeferStmt", "GoStmt", "AssignStmt", "IncDecStmt",
    "ReturnStmt", "IfStmt", "ForStmt", "RangeStmt", "CaseClause", "SwitchStmt",
]
