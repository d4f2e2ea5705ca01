"""
Matching of a function's first parameter against the carrier registry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from .config.model import CarrierDef
from .config.registry import CarrierRegistry
from .syntax.nodes import Field, Ident, SelectorExpr, StarExpr


@dataclass(frozen=True)
class CarrierMatch:
    carrier: CarrierDef
    var_name: str

    @property
    def ctx(self) -> str:
        """Expression that yields the context.Context."""
        return self.carrier.build_context_expr(self.var_name)


def match_carrier(
    param: Optional[Field],
    registry: CarrierRegistry,
    aliases: Dict[str, str],
) -> Optional[CarrierMatch]:
    """
    Match a parameter declaration against the registry.

    The parameter must be named (and not `_`); a pointer type is unwrapped.
    The type must be `pkg.Type` with `pkg` in `aliases`, or an identifier
    already resolved to its import path.
    """
    if param is None or not param.names:
        return None
    var_name = param.names[0].name
    if not var_name or var_name == "_":
        return None

    typ = param.type
    if isinstance(typ, StarExpr):
        typ = typ.x

    if isinstance(typ, Ident) and typ.path:
        package_path, type_name = typ.path, typ.name
    elif isinstance(typ, SelectorExpr) and isinstance(typ.x, Ident) and typ.x.name in aliases:
        package_path, type_name = aliases[typ.x.name], typ.sel.name
    else:
        return None

    carrier = registry.lookup(package_path, type_name)
    if carrier is None:
        return None
    return CarrierMatch(carrier, var_name)


__all__ = ["CarrierMatch", "match_carrier"]
