from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Union

FuncType = Literal["function", "method"]
FuncScope = Literal["exported", "unexported"]


@dataclass
class CarrierDef:
    """A parameter type that carries a context.Context."""
    package: str
    type: str
    # Expression suffix yielding the context, e.g. ".Request().Context()"
    accessor: str = ""

    @property
    def key(self) -> str:
        return f"{self.package}.{self.type}"

    def build_context_expr(self, var_name: str) -> str:
        return var_name + self.accessor


@dataclass
class CarriersCfg:
    custom: List[CarrierDef] = field(default_factory=list)
    default: bool = True


@dataclass
class RegexpsCfg:
    only: List[str] = field(default_factory=list)
    omit: List[str] = field(default_factory=list)


@dataclass
class PackagesCfg:
    patterns: List[str] = field(default_factory=list)
    regexps: RegexpsCfg = field(default_factory=RegexpsCfg)


@dataclass
class FunctionsCfg:
    types: List[FuncType] = field(default_factory=lambda: ["function", "method"])
    scopes: List[FuncScope] = field(default_factory=lambda: ["exported", "unexported"])
    regexps: RegexpsCfg = field(default_factory=RegexpsCfg)


@dataclass
class TemplateFileCfg:
    file: str


@dataclass
class HooksCfg:
    pre: List[str] = field(default_factory=list)
    post: List[str] = field(default_factory=list)


@dataclass
class Config:
    template: Union[str, TemplateFileCfg]
    imports: List[str] = field(default_factory=list)
    carriers: Union[List[CarrierDef], CarriersCfg] = field(default_factory=CarriersCfg)
    packages: PackagesCfg = field(default_factory=PackagesCfg)
    functions: FunctionsCfg = field(default_factory=FunctionsCfg)
    test: bool = False
    mark_generated: bool = False
    hooks: HooksCfg = field(default_factory=HooksCfg)
    # Filled in by the loader for `template: {file: ...}`
    template_path: Optional[str] = field(default=None, init=False)

    @property
    def carriers_cfg(self) -> CarriersCfg:
        """Carriers in the long form; the list form means custom carriers plus defaults."""
        if isinstance(self.carriers, CarriersCfg):
            return self.carriers
        return CarriersCfg(custom=list(self.carriers), default=True)

    @property
    def template_text(self) -> str:
        if isinstance(self.template, TemplateFileCfg):
            raise RuntimeError("template file was not resolved; use load_config()")
        return self.template
