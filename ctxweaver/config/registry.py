"""
Carrier registry: lookup of context carriers by "<package>.<Type>".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ruamel.yaml import YAML

from ..errors import ConfigError
from .model import CarrierDef, CarriersCfg
from .typed import ConfigLoadError, load_typed

_yaml = YAML(typ="safe")
_DEFAULTS_FILE = Path(__file__).with_name("carriers.yaml")


@dataclass
class _CarriersFile:
    carriers: List[CarrierDef] = field(default_factory=list)


def default_carriers() -> List[CarrierDef]:
    """Built-in carriers shipped with the package."""
    raw = _yaml.load(_DEFAULTS_FILE.read_text(encoding="utf-8")) or {}
    try:
        return load_typed(_CarriersFile, raw, path=_DEFAULTS_FILE.name).carriers
    except ConfigLoadError as e:
        raise ConfigError(f"invalid built-in carriers: {e}") from e


class CarrierRegistry:
    """Carriers keyed by "<package>.<Type>"; later registrations replace earlier ones."""

    def __init__(self, carriers: Iterable[CarrierDef] = ()):
        self._carriers: Dict[str, CarrierDef] = {}
        for c in carriers:
            self.register(c)

    @classmethod
    def with_defaults(cls) -> "CarrierRegistry":
        return cls(default_carriers())

    @classmethod
    def from_config(cls, cfg: CarriersCfg) -> "CarrierRegistry":
        reg = cls.with_defaults() if cfg.default else cls()
        for c in cfg.custom:
            reg.register(c)
        return reg

    def register(self, carrier: CarrierDef) -> None:
        self._carriers[carrier.key] = carrier

    def lookup(self, package_path: str, type_name: str) -> Optional[CarrierDef]:
        return self._carriers.get(f"{package_path}.{type_name}")

    def all(self) -> List[CarrierDef]:
        return list(self._carriers.values())

    def __len__(self) -> int:
        return len(self._carriers)

    def __contains__(self, key: str) -> bool:
        return key in self._carriers
