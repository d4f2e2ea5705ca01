from __future__ import annotations

from .load import DEFAULT_CONFIG_FILE, compile_regexps, load_config
from .model import (
    CarrierDef,
    CarriersCfg,
    Config,
    FunctionsCfg,
    HooksCfg,
    PackagesCfg,
    RegexpsCfg,
    TemplateFileCfg,
)
from .registry import CarrierRegistry, default_carriers

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "compile_regexps",
    "load_config",
    "CarrierDef",
    "CarriersCfg",
    "Config",
    "FunctionsCfg",
    "HooksCfg",
    "PackagesCfg",
    "RegexpsCfg",
    "TemplateFileCfg",
    "CarrierRegistry",
    "default_carriers",
]
