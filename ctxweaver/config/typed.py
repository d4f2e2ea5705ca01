"""
Typed coercion of raw YAML data into config dataclasses.

Every failure carries the path of the offending field (`$.carriers[0].type`),
and unknown keys are rejected.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import sys
import typing as t
from dataclasses import fields, is_dataclass
from types import UnionType
from typing import Any, get_args, get_origin

# -------------------- Logging setup --------------------

_LOG = logging.getLogger("ctxweaver.config.typed")


def _setup_logging_once() -> None:
    if getattr(_setup_logging_once, "_inited", False):
        return
    _setup_logging_once._inited = True  # type: ignore[attr-defined]
    if os.environ.get("CTXWEAVER_TYPED_DEBUG"):
        _LOG.setLevel(logging.DEBUG)
        if not _LOG.handlers:
            h = logging.StreamHandler()
            h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
            _LOG.addHandler(h)
            _LOG.propagate = False


_setup_logging_once()

# -------------------- Public error --------------------


class ConfigLoadError(ValueError):
    """Typed load failure, prefixed with the field path."""
    pass

# -------------------- Helpers --------------------


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", str(tp))


def _err(path: str, msg: str) -> ConfigLoadError:
    _LOG.debug("RAISE at %s: %s", path, msg)
    return ConfigLoadError(f"{path}: {msg}")


def _strip_annotated(tp: Any) -> Any:
    if get_origin(tp) is t.Annotated:
        args = get_args(tp)
        return args[0] if args else Any
    return tp


def _coerce_literal(val: Any, tp: Any, path: str) -> Any:
    allowed = get_args(tp)
    if val in allowed:
        return val
    raise _err(path, f"expected one of {list(allowed)}, got {val!r}")


def _coerce_union(val: Any, tp: Any, path: str) -> Any:
    variants = get_args(tp)
    _LOG.debug("Union at %s: variants=%s", path, [_type_name(a) for a in variants])
    errs: list[str] = []
    for sub in variants:
        # NoneType matches only an explicit None
        if sub is type(None):
            if val is None:
                return None
            continue
        try:
            return load_typed(sub, val, path=path)
        except ConfigLoadError as e:
            errs.append(str(e))
    raise _err(path, " | ".join(errs) or f"no variant of {_type_name(tp)} matched")


def _coerce_sequence(val: Any, tp: Any, path: str) -> list:
    if not isinstance(val, list):
        raise _err(path, f"expected list, got {type(val).__name__}")
    (et,) = get_args(tp) or (Any,)
    return [load_typed(et, v, path=f"{path}[{i}]") for i, v in enumerate(val)]


def _resolve_type_hints_for_class(tp: Any) -> dict[str, Any]:
    mod = sys.modules.get(tp.__module__)
    gns: dict[str, Any] = dict(vars(mod)) if mod is not None else {}
    return t.get_type_hints(tp, globalns=gns, localns=None, include_extras=True)


def _coerce_dataclass(val: Any, tp: Any, path: str) -> Any:
    _LOG.debug("Dataclass at %s: %s", path, _type_name(tp))
    if val is None:
        val = {}
    if not isinstance(val, dict):
        raise _err(path, f"expected mapping for {_type_name(tp)}, got {type(val).__name__}")
    type_hints = _resolve_type_hints_for_class(tp)
    fld_map = {f.name: f for f in fields(tp) if f.init}
    extras = set(val.keys()) - set(fld_map.keys())
    if extras:
        raise _err(path, f"unknown key(s): {sorted(extras)}")
    kwargs: dict[str, Any] = {}
    for name, f in fld_map.items():
        sub_path = f"{path}.{name}"
        ftype = type_hints.get(name, f.type)
        if name in val:
            kwargs[name] = load_typed(ftype, val[name], path=sub_path)
        elif f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING:
            continue
        else:
            ftype0 = _strip_annotated(ftype)
            if get_origin(ftype0) in (t.Union, UnionType) and type(None) in get_args(ftype0):
                kwargs[name] = None
            else:
                raise _err(sub_path, "required field missing")
    return tp(**kwargs)


# -------------------- Entry point --------------------


def load_typed(tp: Any, val: Any, *, path: str = "$") -> Any:
    """
    Recursively coerce raw data into the annotated type `tp`.

    Supports dataclasses, Literal, Union/Optional, lists and primitives.

    Raises:
        ConfigLoadError: The value does not fit the type.
    """
    tp = _strip_annotated(tp)
    origin = get_origin(tp)

    if tp is Any or tp is object:
        return val
    if isinstance(tp, type) and is_dataclass(tp):
        return _coerce_dataclass(val, tp, path)
    if origin is t.Literal:
        return _coerce_literal(val, tp, path)
    if origin in (t.Union, UnionType):
        return _coerce_union(val, tp, path)
    if origin is list:
        return _coerce_sequence(val, tp, path)
    if tp is type(None):
        if val is None:
            return None
        raise _err(path, f"expected null, got {type(val).__name__}")

    if tp in (str, int, float, bool):
        # bool is an int subclass; keep them apart
        if not isinstance(val, tp) or (tp is not bool and isinstance(val, bool)):
            raise _err(path, f"expected {_type_name(tp)}, got {type(val).__name__}")
        return val

    raise _err(path, f"unsupported annotation {_type_name(tp)}")


__all__ = ["ConfigLoadError", "load_typed"]
