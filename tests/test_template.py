import pytest

from ctxweaver.carrier import CarrierMatch
from ctxweaver.config import CarrierDef
from ctxweaver.errors import TemplateError
from ctxweaver.golang import parse_file
from ctxweaver.template import (
    StatementTemplate,
    TemplateVars,
    backtick,
    build_vars,
    go_quote,
    qualified_func_name,
)

SOURCE = """package svc

type Handler struct{}
type Repo[T any] struct{}

func Plain(ctx context.Context) {}

func Generic[T any](ctx context.Context) {}

func (h Handler) Value(ctx context.Context) {}

func (h *Handler) Pointer(ctx context.Context) {}

func (r *Repo[T]) Get(ctx context.Context) {}

func (r Repo[T]) Put(ctx context.Context) {}

func (Handler) Anon(ctx context.Context) {}
"""


@pytest.fixture(scope="module")
def funcs():
    return {f.name: f for f in parse_file(SOURCE).funcs}


@pytest.mark.parametrize("name, expected", [
    ("Plain", "svc.Plain"),
    ("Generic", "svc.Generic[...]"),
    ("Value", "svc.Handler.Value"),
    ("Pointer", "svc.(*Handler).Pointer"),
    ("Get", "svc.(*Repo[...]).Get"),
    ("Put", "svc.Repo[...].Put"),
])
def test_qualified_func_name(funcs, name, expected):
    assert qualified_func_name("svc", funcs[name]) == expected


def test_build_vars_for_method(funcs):
    match = CarrierMatch(CarrierDef("github.com/labstack/echo/v4", "Context", ".Request().Context()"), "c")
    v = build_vars("svc", "example.com/svc", funcs["Pointer"], match)
    assert v.ctx == "c.Request().Context()"
    assert v.ctx_var == "c"
    assert v.func_name == "svc.(*Handler).Pointer"
    assert v.func_base_name == "Pointer"
    assert v.package_path == "example.com/svc"
    assert v.receiver_type == "Handler"
    assert v.receiver_var == "h"
    assert v.is_method and v.is_pointer_receiver
    assert not v.is_generic_func and not v.is_generic_receiver


def test_build_vars_for_generic_receiver(funcs):
    match = CarrierMatch(CarrierDef("context", "Context"), "ctx")
    v = build_vars("svc", "example.com/svc", funcs["Put"], match)
    assert v.ctx == "ctx"
    assert v.receiver_var == "r"
    assert v.is_generic_receiver and not v.is_pointer_receiver


def test_build_vars_for_unnamed_receiver(funcs):
    match = CarrierMatch(CarrierDef("context", "Context"), "ctx")
    v = build_vars("svc", "example.com/svc", funcs["Anon"], match)
    assert v.receiver_var == ""
    assert v.receiver_type == "Handler"
    assert v.func_name == "svc.Handler.Anon"


def _vars(**overrides) -> TemplateVars:
    base = dict(
        ctx="ctx", ctx_var="ctx", func_name="svc.Handle", package_name="svc",
        package_path="example.com/svc", func_base_name="Handle",
    )
    base.update(overrides)
    return TemplateVars(**base)


class TestStatementTemplate:

    def test_render(self):
        t = StatementTemplate.parse("defer trace.Start({{ ctx }}, {{ func_name | quote }}).End()")
        assert t.render(_vars()) == 'defer trace.Start(ctx, "svc.Handle").End()'

    def test_render_strips_surrounding_whitespace(self):
        t = StatementTemplate.parse("\n\n  trace({{ ctx }})\n\n")
        assert t.render(_vars()) == "trace(ctx)"

    def test_conditionals(self):
        t = StatementTemplate.parse(
            "{% if is_method %}defer trace({{ ctx }}, {{ receiver_type | quote }})"
            "{% else %}defer trace({{ ctx }}){% endif %}"
        )
        assert t.render(_vars()) == "defer trace(ctx)"
        assert t.render(_vars(is_method=True, receiver_type="S")) == 'defer trace(ctx, "S")'

    def test_undefined_variable_is_an_error(self):
        t = StatementTemplate.parse("trace({{ nope }})")
        with pytest.raises(TemplateError):
            t.render(_vars())

    def test_syntax_error(self):
        with pytest.raises(TemplateError):
            StatementTemplate.parse("trace({{ ctx )")

    def test_unknown_filter_is_an_error(self):
        with pytest.raises(TemplateError):
            StatementTemplate.parse("trace({{ ctx | shout }})")


def test_filters():
    assert go_quote('a "b"\n') == '"a \\"b\\"\\n"'
    assert go_quote("пакет") == '"пакет"'
    assert backtick("x") == "`x`"


def test_vars_as_dict():
    d = _vars().as_dict()
    assert d["func_name"] == "svc.Handle"
    assert d["is_method"] is False
