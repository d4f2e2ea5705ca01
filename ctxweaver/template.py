"""
Statement templates rendered with Jinja2.

Templates see the fields of TemplateVars (`{{ ctx }}`, `{{ func_name | quote }}`,
...). Undefined names are errors, never silently empty.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from jinja2 import Environment, StrictUndefined
from jinja2 import TemplateError as JinjaTemplateError

from .carrier import CarrierMatch
from .errors import TemplateError
from .golang.source import FuncDecl


@dataclass(frozen=True)
class TemplateVars:
    ctx: str                  # context expression, e.g. "c.Request().Context()"
    ctx_var: str              # carrier parameter name
    func_name: str            # e.g. "service.(*Handler).Serve"
    package_name: str
    package_path: str
    func_base_name: str
    receiver_type: str = ""
    receiver_var: str = ""
    is_method: bool = False
    is_pointer_receiver: bool = False
    is_generic_func: bool = False
    is_generic_receiver: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def qualified_func_name(package_name: str, decl: FuncDecl) -> str:
    """
    Display name of a function:
      • pkg.Func / pkg.Func[...]
      • pkg.Type.Method / pkg.Type[...].Method
      • pkg.(*Type).Method / pkg.(*Type[...]).Method
    """
    recv = decl.receiver
    if recv is None:
        suffix = "[...]" if decl.generic else ""
        return f"{package_name}.{decl.name}{suffix}"
    type_name = recv.type_name + ("[...]" if recv.generic else "")
    if recv.pointer:
        return f"{package_name}.(*{type_name}).{decl.name}"
    return f"{package_name}.{type_name}.{decl.name}"


def build_vars(package_name: str, package_path: str, decl: FuncDecl, match: CarrierMatch) -> TemplateVars:
    recv = decl.receiver
    return TemplateVars(
        ctx=match.ctx,
        ctx_var=match.var_name,
        func_name=qualified_func_name(package_name, decl),
        package_name=package_name,
        package_path=package_path,
        func_base_name=decl.name,
        receiver_type=recv.type_name if recv else "",
        receiver_var=recv.name if recv else "",
        is_method=recv is not None,
        is_pointer_receiver=bool(recv and recv.pointer),
        is_generic_func=decl.generic,
        is_generic_receiver=bool(recv and recv.generic),
    )


def go_quote(value: Any) -> str:
    """Go double-quoted string literal."""
    # JSON string escapes are a subset of Go's
    return json.dumps(str(value), ensure_ascii=False)


def backtick(value: Any) -> str:
    return f"`{value}`"


def _environment() -> Environment:
    env = Environment(undefined=StrictUndefined, keep_trailing_newline=True, autoescape=False)
    env.filters["quote"] = go_quote
    env.filters["backtick"] = backtick
    return env


class StatementTemplate:
    """A parsed statement template."""

    def __init__(self, raw: str, env: Optional[Environment] = None):
        self.raw = raw
        env = env or _environment()
        try:
            self._template = env.from_string(raw)
        except JinjaTemplateError as e:
            raise TemplateError(f"failed to parse template: {e}") from e

    @classmethod
    def parse(cls, text: str) -> "StatementTemplate":
        return cls(text)

    def render(self, vars: TemplateVars) -> str:
        """Render with the given variables; the result is stripped."""
        try:
            return self._template.render(**vars.as_dict()).strip()
        except JinjaTemplateError as e:
            raise TemplateError(f"failed to execute template: {e}") from e


__all__ = [
    "TemplateVars",
    "StatementTemplate",
    "build_vars",
    "qualified_func_name",
    "go_quote",
    "backtick",
]
