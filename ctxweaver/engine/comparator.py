"""
Structural comparison of syntax nodes.

Two modes are supported:
  • SKELETON: node kinds, identifiers, operators and arities match; literal
    values may differ;
  • EXACT: skeleton plus literal-value equality.

Dispatch goes through a registry keyed by node class. Each comparer handles one
kind and delegates children back to the Comparator.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable, Dict, Optional, Sequence

from ..syntax.nodes import (
    AssignStmt, BasicLit, BinaryExpr, BlockStmt, CallExpr, CaseClause, CompositeLit,
    DeferStmt, ExprStmt, Field, FieldList, ForStmt, FuncLit, FuncType, GoStmt, Ident,
    IfStmt, IncDecStmt, IndexExpr, KeyValueExpr, Node, Opaque, ParenExpr, RangeStmt,
    ReturnStmt, SelectorExpr, SliceExpr, StarExpr, SwitchStmt, TypeAssertExpr,
    UnaryExpr, Variadic,
)


class MatchMode(Enum):
    SKELETON = "skeleton"
    EXACT = "exact"


CompareFn = Callable[[Node, Node, bool, "Comparator"], bool]

# Built-in comparers, collected by the @comparer decorator below
_DEFAULT_COMPARERS: Dict[type, CompareFn] = {}


def comparer(*node_types: type) -> Callable[[CompareFn], CompareFn]:
    """Register a function as the default comparer for the given node classes."""
    def decorator(fn: CompareFn) -> CompareFn:
        for tp in node_types:
            _DEFAULT_COMPARERS[tp] = fn
        return fn
    return decorator


def _permissive(_a: Node, _b: Node, _exact: bool, _c: "Comparator") -> bool:
    return True


class Comparator:
    """
    Registry of per-kind comparers.

    Kinds without a comparer are handed to `fallback`, which defaults to a
    permissive match so unknown tree shapes never reject everything.
    """

    def __init__(self, fallback: Optional[CompareFn] = None):
        self._comparers: Dict[type, CompareFn] = {}
        self._fallback: CompareFn = fallback or _permissive

    @classmethod
    def with_defaults(cls, fallback: Optional[CompareFn] = None) -> "Comparator":
        c = cls(fallback)
        for tp, fn in _DEFAULT_COMPARERS.items():
            c.register(tp, fn)
        return c

    def register(self, node_type: type, fn: CompareFn) -> None:
        self._comparers[node_type] = fn

    def compare(self, a: Optional[Node], b: Optional[Node], mode: MatchMode) -> bool:
        return self.equal(a, b, mode is MatchMode.EXACT)

    def equal(self, a: Optional[Node], b: Optional[Node], exact: bool) -> bool:
        if a is None and b is None:
            return True
        if a is None or b is None:
            return False

        if type(a) is not type(b):
            return _import_equivalent(a, b)

        fn = self._comparers.get(type(a))
        if fn is None:
            return self._fallback(a, b, exact, self)
        return fn(a, b, exact, self)

    def equal_lists(self, a: Sequence[Node], b: Sequence[Node], exact: bool) -> bool:
        if len(a) != len(b):
            return False
        return all(self.equal(x, y, exact) for x, y in zip(a, b))


def _import_equivalent(a: Node, b: Node) -> bool:
    """
    `pkg.Name` parsed as a selector and `Name` resolved to an import path denote
    the same reference when the member names agree.
    """
    if isinstance(a, SelectorExpr) and isinstance(b, Ident) and b.path:
        return a.sel.name == b.name
    if isinstance(a, Ident) and a.path and isinstance(b, SelectorExpr):
        return a.name == b.sel.name
    return False


# ============= Statements =============

@comparer(DeferStmt, GoStmt)
def _call_stmt(a, b, exact, c):
    return c.equal(a.call, b.call, exact)


@comparer(ExprStmt)
def _expr_stmt(a, b, exact, c):
    return c.equal(a.x, b.x, exact)


@comparer(IfStmt)
def _if_stmt(a, b, exact, c):
    return (c.equal(a.init, b.init, exact)
            and c.equal(a.cond, b.cond, exact)
            and c.equal(a.body, b.body, exact)
            and c.equal(a.else_, b.else_, exact))


@comparer(ForStmt)
def _for_stmt(a, b, exact, c):
    return (c.equal(a.init, b.init, exact)
            and c.equal(a.cond, b.cond, exact)
            and c.equal(a.post, b.post, exact)
            and c.equal(a.body, b.body, exact))


@comparer(RangeStmt)
def _range_stmt(a, b, exact, c):
    if a.tok != b.tok:
        return False
    return (c.equal(a.key, b.key, exact)
            and c.equal(a.value, b.value, exact)
            and c.equal(a.x, b.x, exact)
            and c.equal(a.body, b.body, exact))


@comparer(SwitchStmt)
def _switch_stmt(a, b, exact, c):
    return (c.equal(a.init, b.init, exact)
            and c.equal(a.tag, b.tag, exact)
            and c.equal(a.body, b.body, exact))


@comparer(BlockStmt)
def _block_stmt(a, b, exact, c):
    return c.equal_lists(a.stmts, b.stmts, exact)


@comparer(AssignStmt)
def _assign_stmt(a, b, exact, c):
    if a.tok != b.tok:
        return False
    if len(a.lhs) != len(b.lhs) or len(a.rhs) != len(b.rhs):
        return False
    return c.equal_lists(a.lhs, b.lhs, exact) and c.equal_lists(a.rhs, b.rhs, exact)


@comparer(IncDecStmt)
def _inc_dec_stmt(a, b, exact, c):
    return a.tok == b.tok and c.equal(a.x, b.x, exact)


@comparer(ReturnStmt)
def _return_stmt(a, b, exact, c):
    return c.equal_lists(a.results, b.results, exact)


@comparer(CaseClause)
def _case_clause(a, b, exact, c):
    if len(a.exprs) != len(b.exprs) or len(a.body) != len(b.body):
        return False
    return c.equal_lists(a.exprs, b.exprs, exact) and c.equal_lists(a.body, b.body, exact)


# ============= Expressions =============

@comparer(CallExpr)
def _call_expr(a, b, exact, c):
    if a.ellipsis != b.ellipsis:
        return False
    if not c.equal(a.fun, b.fun, exact):
        return False
    return c.equal_lists(a.args, b.args, exact)


@comparer(SelectorExpr)
def _selector_expr(a, b, exact, c):
    if a.sel.name != b.sel.name:
        return False
    return c.equal(a.x, b.x, exact)


@comparer(Ident)
def _ident(a, b, _exact, _c):
    # Identifiers are never wildcarded: `ctx` and `c` are different statements
    return a.name == b.name


@comparer(BasicLit)
def _basic_lit(a, b, exact, _c):
    if a.lit_kind != b.lit_kind:
        return False
    return not exact or a.value == b.value


@comparer(UnaryExpr)
def _unary_expr(a, b, exact, c):
    return a.op == b.op and c.equal(a.x, b.x, exact)


@comparer(BinaryExpr)
def _binary_expr(a, b, exact, c):
    if a.op != b.op:
        return False
    return c.equal(a.x, b.x, exact) and c.equal(a.y, b.y, exact)


@comparer(ParenExpr, StarExpr)
def _wrapper_expr(a, b, exact, c):
    return c.equal(a.x, b.x, exact)


@comparer(IndexExpr)
def _index_expr(a, b, exact, c):
    return c.equal(a.x, b.x, exact) and c.equal_lists(a.indices, b.indices, exact)


@comparer(SliceExpr)
def _slice_expr(a, b, exact, c):
    return (c.equal(a.x, b.x, exact)
            and c.equal(a.low, b.low, exact)
            and c.equal(a.high, b.high, exact)
            and c.equal(a.max, b.max, exact))


@comparer(TypeAssertExpr)
def _type_assert_expr(a, b, exact, c):
    return c.equal(a.x, b.x, exact) and c.equal(a.type, b.type, exact)


@comparer(KeyValueExpr)
def _key_value_expr(a, b, exact, c):
    return c.equal(a.key, b.key, exact) and c.equal(a.value, b.value, exact)


@comparer(CompositeLit)
def _composite_lit(a, b, exact, c):
    if not c.equal(a.type, b.type, exact):
        return False
    return c.equal_lists(a.elts, b.elts, exact)


@comparer(FuncLit)
def _func_lit(a, b, exact, c):
    return c.equal(a.type, b.type, exact) and c.equal(a.body, b.body, exact)


@comparer(FuncType)
def _func_type(a, b, exact, c):
    return c.equal(a.params, b.params, exact) and c.equal(a.results, b.results, exact)


@comparer(FieldList)
def _field_list(a, b, exact, c):
    return c.equal_lists(a.fields, b.fields, exact)


@comparer(Field)
def _field(a, b, exact, c):
    # Parameter names are cosmetic; only declared types count
    return c.equal(a.type, b.type, exact)


@comparer(Variadic)
def _variadic(a, b, exact, c):
    return c.equal(a.elt, b.elt, exact)


_WS = re.compile(r"\s+")


@comparer(Opaque)
def _opaque(a, b, _exact, _c):
    if a.node_type != b.node_type:
        return False
    return _WS.sub(" ", a.text.strip()) == _WS.sub(" ", b.text.strip())


# ============= Public API =============

default_comparator = Comparator.with_defaults()


def compare(a: Optional[Node], b: Optional[Node], mode: MatchMode) -> bool:
    return default_comparator.compare(a, b, mode)


def matches_skeleton(a: Optional[Node], b: Optional[Node]) -> bool:
    """Same shape, identifiers and operators; literal values may differ."""
    return default_comparator.equal(a, b, False)


def matches_exact(a: Optional[Node], b: Optional[Node]) -> bool:
    """Skeleton match plus equal literal values."""
    return default_comparator.equal(a, b, True)


__all__ = [
    "MatchMode",
    "Comparator",
    "comparer",
    "default_comparator",
    "compare",
    "matches_skeleton",
    "matches_exact",
]
