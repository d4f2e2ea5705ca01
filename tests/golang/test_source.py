"""
Tests for loading Go files and candidate statements.
"""

import textwrap

import pytest

from ctxweaver.errors import CandidateParseError, EmptyCandidateError
from ctxweaver.golang import ImportSpec, import_local_name, parse_file, parse_statements
from ctxweaver.golang.source import requalify_statements
from ctxweaver.syntax import (
    AssignStmt, CallExpr, DeferStmt, ExprStmt, Ident, Opaque, SelectorExpr, StarExpr,
)

SOURCE = textwrap.dedent('''
    // Package svc serves things.
    package svc

    import (
    	"context"

    	echo "github.com/labstack/echo/v4"
    	"gopkg.in/yaml.v3"
    	_ "embed"
    )

    // Handle handles.
    //ctxweaver:skip
    func Handle(ctx context.Context, n int) error {
    	return nil
    }

    func (s *Server) Serve(c echo.Context) error {
    	return nil
    }

    func (r Repo[T]) Get(ctx context.Context) {}

    func Map[T any](ctx context.Context, xs []T) {
    }

    func declared(ctx context.Context)
''').lstrip()


class TestParseFile:

    def test_package_and_imports(self):
        gofile = parse_file(SOURCE)
        assert gofile.package_name == "svc"
        assert [i.path for i in gofile.imports] == [
            "context", "github.com/labstack/echo/v4", "gopkg.in/yaml.v3", "embed",
        ]
        assert gofile.aliases == {
            "context": "context",
            "echo": "github.com/labstack/echo/v4",
            "yaml": "gopkg.in/yaml.v3",
        }
        assert gofile.header_comments == ["// Package svc serves things."]

    def test_functions_with_bodies_only(self):
        gofile = parse_file(SOURCE)
        assert [f.name for f in gofile.funcs] == ["Handle", "Serve", "Get", "Map"]

    def test_function_details(self):
        handle, serve, get, generic = parse_file(SOURCE).funcs

        assert handle.comments == ["// Handle handles.", "//ctxweaver:skip"]
        assert handle.line == 14
        assert handle.is_exported and not handle.is_method
        assert [p.names[0].name for p in handle.params] == ["ctx", "n"]
        assert handle.params[0].type.name == "Context"
        assert handle.params[0].type.path == "context"

        assert serve.is_method
        assert serve.receiver.name == "s"
        assert serve.receiver.type_name == "Server"
        assert serve.receiver.pointer

        assert get.receiver.generic and not get.receiver.pointer
        assert get.receiver.type_name == "Repo"
        assert generic.generic

    def test_body_offsets_cover_braces(self):
        gofile = parse_file(SOURCE)
        handle = gofile.funcs[0]
        body = SOURCE[handle.body_start:handle.body_end]
        assert body.startswith("{") and body.endswith("}")
        assert "return nil" in body
        assert handle.indent == ""

    def test_statement_source_and_indent(self):
        handle = parse_file(SOURCE).funcs[0]
        ret = handle.body.stmts[0]
        assert ret.source == "return nil"
        assert ret.indent == "\t"

    def test_qualified_reference_resolved_through_imports(self):
        text = textwrap.dedent('''
            package svc

            import t "github.com/example/trace"

            func F(ctx context.Context) {
            	defer t.Start(ctx)
            	local.Call()
            }
        ''').lstrip()
        stmts = parse_file(text).funcs[0].body.stmts
        call = stmts[0].call
        assert isinstance(call, CallExpr)
        assert isinstance(call.fun, Ident)
        assert call.fun.path == "github.com/example/trace"
        assert isinstance(stmts[1].x.fun, SelectorExpr)

    def test_pointer_carrier_param(self):
        text = "package svc\n\nimport \"github.com/spf13/cobra\"\n\nfunc Run(cmd *cobra.Command, args []string) {\n}\n"
        param = parse_file(text).funcs[0].params[0]
        assert isinstance(param.type, StarExpr)
        assert param.type.x.path == "github.com/spf13/cobra"

    def test_syntax_errors_do_not_abort(self):
        text = "package svc\n\nfunc Good(ctx context.Context) {\n\twork()\n}\n\nfunc Bad( {\n"
        names = [f.name for f in parse_file(text).funcs]
        assert "Good" in names


class TestParseStatements:

    def test_statements(self):
        nodes = parse_statements('ctx, span := tracer.Start(ctx, "x")\ndefer span.End()')
        assert isinstance(nodes[0], AssignStmt)
        assert nodes[0].tok == ":="
        assert isinstance(nodes[1], DeferStmt)
        assert nodes[1].source == "defer span.End()"

    def test_trailing_comment_goes_to_footer(self):
        nodes = parse_statements("trace(ctx)\n// done")
        assert isinstance(nodes[0], ExprStmt)
        assert nodes[0].trivia.footer == ["// done"]

    def test_opaque_statement(self):
        nodes = parse_statements("var _ = ctx")
        assert isinstance(nodes[0], Opaque)
        assert nodes[0].node_type == "var_declaration"

    def test_invalid_text(self):
        with pytest.raises(CandidateParseError) as ei:
            parse_statements("defer (")
        assert ei.value.text == "defer ("

    def test_text_escaping_the_function(self):
        with pytest.raises(CandidateParseError):
            parse_statements("}\nfunc g() {")

    def test_empty_text(self):
        with pytest.raises(EmptyCandidateError):
            parse_statements("")
        with pytest.raises(EmptyCandidateError):
            parse_statements("// only a comment")


@pytest.mark.parametrize("path, name", [
    ("context", "context"),
    ("github.com/labstack/echo/v4", "echo"),
    ("gopkg.in/yaml.v3", "yaml"),
    ("github.com/spf13/cobra", "cobra"),
    ("v2", "v2"),
])
def test_import_local_name(path, name):
    assert import_local_name(path) == name


def test_import_spec_local_name():
    assert ImportSpec("github.com/x/y", "z").local_name == "z"
    assert ImportSpec("embed", "_").local_name is None
    assert ImportSpec("strings", ".").local_name is None
    assert ImportSpec("strings").local_name == "strings"


class TestRequalifyStatements:

    def test_qualifiers_renamed(self):
        text = 'ctx, span := trace.Start(ctx, "x")\ndefer span.End()\nvar _ trace.Span'
        assert requalify_statements(text, {"trace": "tr"}) == (
            'ctx, span := tr.Start(ctx, "x")\ndefer span.End()\nvar _ tr.Span'
        )

    def test_other_operands_untouched(self):
        text = "defer trace.Start(ctx).End()"
        assert requalify_statements(text, {"log": "lg"}) == text
        assert requalify_statements(text, {}) == text

    def test_invalid_text_returned_as_is(self):
        assert requalify_statements("defer (", {"trace": "tr"}) == "defer ("
