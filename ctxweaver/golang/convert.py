"""
Conversion of tree-sitter Go nodes into the engine's syntax node model.

Statements and expressions with a dedicated kind are converted structurally;
everything else becomes Opaque(node_type, text). Only the top-level body
block of a function keeps comment trivia; nested blocks are converted for
comparison purposes only, since printing always reuses statement source text.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from tree_sitter import Node as TSNode

from ..syntax.nodes import (
    AssignStmt, BasicLit, BinaryExpr, BlockStmt, CallExpr, CaseClause, CompositeLit,
    DeferStmt, ExprStmt, Field, FieldList, ForStmt, FuncLit, FuncType, GoStmt, Ident,
    IfStmt, IncDecStmt, IndexExpr, KeyValueExpr, Node, Opaque, ParenExpr, RangeStmt,
    ReturnStmt, SelectorExpr, SliceExpr, StarExpr, SwitchStmt, TypeAssertExpr,
    UnaryExpr, Variadic,
)
from .document import GoDocument

_IDENT_TYPES = {
    "identifier", "field_identifier", "type_identifier", "package_identifier",
    "blank_identifier", "true", "false", "nil", "iota",
}

_LITERAL_KINDS = {
    "interpreted_string_literal": "STRING",
    "raw_string_literal": "STRING",
    "int_literal": "INT",
    "float_literal": "FLOAT",
    "imaginary_literal": "IMAG",
    "rune_literal": "CHAR",
}

_SKIPPED_STMT_TYPES = {"empty_statement"}


def named(node: TSNode) -> List[TSNode]:
    """Named children without comments."""
    return [c for c in node.named_children if c.type != "comment"]


def block_items(node: TSNode) -> List[TSNode]:
    """
    Statements and comments of a block or case clause, in order.

    Newer grammars wrap them in a `statement_list` node; older ones put them
    directly under the block.
    """
    items: List[TSNode] = []
    for child in node.named_children:
        if child.type == "statement_list":
            items.extend(block_items(child))
        elif child.type in _SKIPPED_STMT_TYPES:
            continue
        elif child.type in ("expression_list", "expression_case", "default_case") and node.type.endswith("_case"):
            # case values are not statements
            continue
        else:
            items.append(child)
    return items


class Converter:
    """
    Builds syntax nodes from a parsed GoDocument.

    Args:
        doc: Parsed document the tree-sitter nodes belong to.
        aliases: Local package name -> import path. Package-qualified
            references whose operand is a known alias are resolved to
            Ident(name, path=...).
    """

    def __init__(self, doc: GoDocument, aliases: Optional[Dict[str, str]] = None):
        self.doc = doc
        self.aliases = dict(aliases or {})
        self._stmt_handlers: Dict[str, Callable[[TSNode], Node]] = {
            "expression_statement": self._expression_statement,
            "defer_statement": self._defer_statement,
            "go_statement": self._go_statement,
            "assignment_statement": self._assignment_statement,
            "short_var_declaration": self._short_var_declaration,
            "inc_statement": self._inc_statement,
            "dec_statement": self._dec_statement,
            "return_statement": self._return_statement,
            "if_statement": self._if_statement,
            "for_statement": self._for_statement,
            "expression_switch_statement": self._switch_statement,
            "block": self.block,
        }
        self._expr_handlers: Dict[str, Callable[[TSNode], Node]] = {
            "selector_expression": self._selector_expression,
            "qualified_type": self._qualified_type,
            "call_expression": self._call_expression,
            "type_conversion_expression": self._type_conversion_expression,
            "unary_expression": self._unary_expression,
            "binary_expression": self._binary_expression,
            "parenthesized_expression": self._parenthesized_expression,
            "pointer_type": self._pointer_type,
            "index_expression": self._index_expression,
            "generic_type": self._generic_type,
            "type_instantiation_expression": self._generic_type,
            "slice_expression": self._slice_expression,
            "type_assertion_expression": self._type_assertion_expression,
            "composite_literal": self._composite_literal,
            "func_literal": self._func_literal,
            "function_type": self._function_type,
            "parameter_list": self.field_list,
            "type_elem": self._type_elem,
        }

    # ---------- helpers ----------

    def text(self, node: TSNode) -> str:
        return self.doc.get_node_text(node)

    def _opaque(self, node: TSNode) -> Opaque:
        return Opaque(node.type, self.text(node))

    def _list(self, node: Optional[TSNode]) -> List[Node]:
        """Elements of an expression_list (or a single expression)."""
        if node is None:
            return []
        if node.type == "expression_list":
            return [self.expr(c) for c in named(node)]
        return [self.expr(node)]

    def _qualified(self, operand: str, name: str) -> Node:
        path = self.aliases.get(operand)
        if path:
            return Ident(name, path=path)
        return SelectorExpr(Ident(operand), Ident(name))

    # ---------- statements ----------

    def stmt(self, node: TSNode) -> Node:
        handler = self._stmt_handlers.get(node.type)
        if handler is not None:
            return handler(node)
        if node.type in self._expr_handlers or node.type in _IDENT_TYPES or node.type in _LITERAL_KINDS:
            # `if f(); cond` style initializers
            return ExprStmt(self.expr(node))
        return self._opaque(node)

    def block(self, node: TSNode) -> BlockStmt:
        return BlockStmt([self.stmt(c) for c in block_items(node) if c.type != "comment"])

    def _expression_statement(self, node: TSNode) -> Node:
        return ExprStmt(self.expr(named(node)[0]))

    def _defer_statement(self, node: TSNode) -> Node:
        return DeferStmt(self.expr(named(node)[0]))

    def _go_statement(self, node: TSNode) -> Node:
        return GoStmt(self.expr(named(node)[0]))

    def _assignment_statement(self, node: TSNode) -> Node:
        op = node.child_by_field_name("operator")
        return AssignStmt(
            self.text(op) if op is not None else "=",
            lhs=self._list(node.child_by_field_name("left")),
            rhs=self._list(node.child_by_field_name("right")),
        )

    def _short_var_declaration(self, node: TSNode) -> Node:
        return AssignStmt(
            ":=",
            lhs=self._list(node.child_by_field_name("left")),
            rhs=self._list(node.child_by_field_name("right")),
        )

    def _inc_statement(self, node: TSNode) -> Node:
        return IncDecStmt(self.expr(named(node)[0]), "++")

    def _dec_statement(self, node: TSNode) -> Node:
        return IncDecStmt(self.expr(named(node)[0]), "--")

    def _return_statement(self, node: TSNode) -> Node:
        children = named(node)
        return ReturnStmt(self._list(children[0]) if children else [])

    def _if_statement(self, node: TSNode) -> Node:
        init = node.child_by_field_name("initializer")
        alt = node.child_by_field_name("alternative")
        return IfStmt(
            self.stmt(init) if init is not None else None,
            self.expr(node.child_by_field_name("condition")),
            self.block(node.child_by_field_name("consequence")),
            self.stmt(alt) if alt is not None else None,
        )

    def _for_statement(self, node: TSNode) -> Node:
        body = self.block(node.child_by_field_name("body"))
        clause = next((c for c in named(node) if c.type != "block"), None)

        if clause is None:
            return ForStmt(None, None, None, body)

        if clause.type == "for_clause":
            init = clause.child_by_field_name("initializer")
            cond = clause.child_by_field_name("condition")
            post = clause.child_by_field_name("update")
            return ForStmt(
                self.stmt(init) if init is not None else None,
                self.expr(cond) if cond is not None else None,
                self.stmt(post) if post is not None else None,
                body,
            )

        if clause.type == "range_clause":
            left = self._list(clause.child_by_field_name("left"))
            tok = next((c.type for c in clause.children if c.type in ("=", ":=")), "")
            return RangeStmt(
                left[0] if left else None,
                left[1] if len(left) > 1 else None,
                tok,
                self.expr(clause.child_by_field_name("right")),
                body,
            )

        # for cond { ... }
        return ForStmt(None, self.expr(clause), None, body)

    def _switch_statement(self, node: TSNode) -> Node:
        init = node.child_by_field_name("initializer")
        value = node.child_by_field_name("value")
        cases: List[Node] = []
        for child in named(node):
            if child.type == "expression_case":
                exprs = self._list(child.child_by_field_name("value"))
            elif child.type == "default_case":
                exprs = []
            else:
                continue
            body = [self.stmt(c) for c in block_items(child) if c.type != "comment"]
            cases.append(CaseClause(exprs, body))
        return SwitchStmt(
            self.stmt(init) if init is not None else None,
            self.expr(value) if value is not None else None,
            BlockStmt(cases),
        )

    # ---------- expressions ----------

    def expr(self, node: Optional[TSNode]) -> Optional[Node]:
        if node is None:
            return None
        if node.type in _IDENT_TYPES:
            return Ident(self.text(node))
        kind = _LITERAL_KINDS.get(node.type)
        if kind is not None:
            return BasicLit(kind, self.text(node))
        handler = self._expr_handlers.get(node.type)
        if handler is not None:
            return handler(node)
        return self._opaque(node)

    def _selector_expression(self, node: TSNode) -> Node:
        operand = node.child_by_field_name("operand")
        field = self.text(node.child_by_field_name("field"))
        if operand.type == "identifier":
            return self._qualified(self.text(operand), field)
        return SelectorExpr(self.expr(operand), Ident(field))

    def _qualified_type(self, node: TSNode) -> Node:
        return self._qualified(
            self.text(node.child_by_field_name("package")),
            self.text(node.child_by_field_name("name")),
        )

    def _call_expression(self, node: TSNode) -> Node:
        fun = self.expr(node.child_by_field_name("function"))
        type_args = node.child_by_field_name("type_arguments")
        if type_args is not None:
            fun = IndexExpr(fun, [self.expr(c) for c in named(type_args)])

        args: List[Node] = []
        ellipsis = False
        arguments = node.child_by_field_name("arguments")
        for child in named(arguments) if arguments is not None else []:
            if child.type == "variadic_argument":
                ellipsis = True
                args.append(self.expr(named(child)[0]))
            else:
                args.append(self.expr(child))
        if arguments is not None and any(c.type == "..." for c in arguments.children):
            ellipsis = True
        return CallExpr(fun, args, ellipsis)

    def _type_conversion_expression(self, node: TSNode) -> Node:
        return CallExpr(
            self.expr(node.child_by_field_name("type")),
            [self.expr(node.child_by_field_name("operand"))],
        )

    def _unary_expression(self, node: TSNode) -> Node:
        op = self.text(node.child_by_field_name("operator"))
        x = self.expr(node.child_by_field_name("operand"))
        if op == "*":
            return StarExpr(x)
        return UnaryExpr(op, x)

    def _binary_expression(self, node: TSNode) -> Node:
        return BinaryExpr(
            self.text(node.child_by_field_name("operator")),
            self.expr(node.child_by_field_name("left")),
            self.expr(node.child_by_field_name("right")),
        )

    def _parenthesized_expression(self, node: TSNode) -> Node:
        return ParenExpr(self.expr(named(node)[0]))

    def _pointer_type(self, node: TSNode) -> Node:
        return StarExpr(self.expr(named(node)[0]))

    def _type_elem(self, node: TSNode) -> Node:
        children = named(node)
        if len(children) == 1:
            return self.expr(children[0])
        return self._opaque(node)

    def _index_expression(self, node: TSNode) -> Node:
        operand = node.child_by_field_name("operand")
        indices = [c for c in named(node) if c.id != operand.id]
        return IndexExpr(self.expr(operand), [self.expr(c) for c in indices])

    def _generic_type(self, node: TSNode) -> Node:
        base = node.child_by_field_name("type")
        args = node.child_by_field_name("type_arguments")
        if args is not None:
            indices = named(args)
        else:
            indices = [c for c in named(node) if base is None or c.id != base.id]
        return IndexExpr(self.expr(base), [self.expr(c) for c in indices])

    def _slice_expression(self, node: TSNode) -> Node:
        return SliceExpr(
            self.expr(node.child_by_field_name("operand")),
            self.expr(node.child_by_field_name("start")),
            self.expr(node.child_by_field_name("end")),
            self.expr(node.child_by_field_name("capacity")),
        )

    def _type_assertion_expression(self, node: TSNode) -> Node:
        return TypeAssertExpr(
            self.expr(node.child_by_field_name("operand")),
            self.expr(node.child_by_field_name("type")),
        )

    def _composite_literal(self, node: TSNode) -> Node:
        body = node.child_by_field_name("body")
        return CompositeLit(
            self.expr(node.child_by_field_name("type")),
            [self._element(c) for c in named(body)] if body is not None else [],
        )

    def _element(self, node: TSNode) -> Node:
        if node.type == "literal_element":
            return self._element(named(node)[0])
        if node.type == "literal_value":
            return CompositeLit(None, [self._element(c) for c in named(node)])
        if node.type == "keyed_element":
            key = node.child_by_field_name("key")
            value = node.child_by_field_name("value")
            if key is None or value is None:
                key, value = named(node)[:2]
            return KeyValueExpr(self._element(key), self._element(value))
        return self.expr(node)

    def _signature(self, node: TSNode) -> FuncType:
        params = node.child_by_field_name("parameters")
        result = node.child_by_field_name("result")
        if result is None:
            results = None
        elif result.type == "parameter_list":
            results = self.field_list(result)
        else:
            results = FieldList([Field([], self.expr(result))])
        return FuncType(self.field_list(params) if params is not None else FieldList(), results)

    def _func_literal(self, node: TSNode) -> Node:
        return FuncLit(self._signature(node), self.block(node.child_by_field_name("body")))

    def _function_type(self, node: TSNode) -> Node:
        return self._signature(node)

    def field_list(self, node: TSNode) -> FieldList:
        fields: List[Field] = []
        for child in named(node):
            names = [Ident(self.text(n)) for n in child.children_by_field_name("name")]
            typ = self.expr(child.child_by_field_name("type"))
            if child.type == "variadic_parameter_declaration":
                typ = Variadic(typ)
            elif child.type != "parameter_declaration":
                typ = self._opaque(child)
            fields.append(Field(names, typ))
        return FieldList(fields)

    # ---------- function bodies ----------

    def body(self, node: TSNode) -> BlockStmt:
        """
        Convert a function body, attaching comments and blank-line hints.

        Comments on the same line as the end of a statement become its trailing
        trivia; own-line comments are collected as leading trivia of the next
        statement; whatever is left after the last statement goes to the
        block's footer. A comment on the line of the opening brace is kept in
        the block's leading trivia.
        """
        block = BlockStmt()
        prev: Optional[Node] = None
        prev_end_byte = node.start_byte + 1  # after "{"
        last_row = node.start_point[0]
        pending: List[str] = []
        pending_blank = False

        for item in block_items(node):
            row = item.start_point[0]
            gap = row - last_row > 1

            if item.type == "comment":
                text = self.text(item)
                if row == last_row and not pending:
                    spacing = self.doc.get_text_between(prev_end_byte, item.start_byte)
                    if prev is None:
                        block.trivia.leading.append(spacing + text)
                    else:
                        prev.trivia.trailing.append(spacing + text)
                elif gap and pending:
                    pending.extend(["", text])
                else:
                    if gap:
                        if prev is not None:
                            prev.trivia.blank_after = True
                        else:
                            pending_blank = True
                    pending.append(text)
                last_row = item.end_point[0]
                prev_end_byte = item.end_byte
                continue

            stmt = self.stmt(item)
            stmt.source = self.text(item)
            stmt.indent = self.doc.get_line_indent(row)
            if gap:
                if pending:
                    pending.append("")
                elif prev is not None:
                    prev.trivia.blank_after = True
                else:
                    pending_blank = True
            stmt.trivia.leading = pending
            stmt.trivia.blank_before = pending_blank
            pending, pending_blank = [], False

            block.stmts.append(stmt)
            prev = stmt
            last_row = item.end_point[0]
            prev_end_byte = item.end_byte

        block.trivia.footer = pending
        return block


__all__ = ["Converter", "named", "block_items"]
