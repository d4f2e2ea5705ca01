from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import ConfigError
from .model import Config, RegexpsCfg, TemplateFileCfg
from .typed import ConfigLoadError, load_typed

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")

DEFAULT_CONFIG_FILE = "ctxweaver.yaml"


def _read_yaml_map(path: Path) -> dict:
    """Read a YAML file that must contain a mapping."""
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


def compile_regexps(patterns: List[str], where: str) -> List[re.Pattern]:
    out = []
    for i, pattern in enumerate(patterns):
        try:
            out.append(re.compile(pattern))
        except re.error as e:
            raise ConfigError(f"{where}[{i}]: invalid regexp {pattern!r}: {e}") from e
    return out


def _validate(cfg: Config) -> None:
    for i, carrier in enumerate(cfg.carriers_cfg.custom):
        if not carrier.package:
            raise ConfigError(f"$.carriers[{i}].package: must not be empty")
        if not carrier.type:
            raise ConfigError(f"$.carriers[{i}].type: must not be empty")

    regexps: List[tuple[str, RegexpsCfg]] = [
        ("$.packages.regexps", cfg.packages.regexps),
        ("$.functions.regexps", cfg.functions.regexps),
    ]
    for where, rx in regexps:
        compile_regexps(rx.only, f"{where}.only")
        compile_regexps(rx.omit, f"{where}.omit")


def load_config(path: Path) -> Config:
    """
    Load and validate a ctxweaver config file.

    A `template: {file: ...}` reference is resolved relative to the config
    file's directory and replaced with the file contents.

    Raises:
        ConfigError: Missing file, invalid YAML, schema or validation failure.
    """
    raw = _read_yaml_map(path)
    try:
        cfg: Config = load_typed(Config, raw, path="$")
    except ConfigLoadError as e:
        raise ConfigError(f"{path}: {e}") from e

    if isinstance(cfg.template, TemplateFileCfg):
        template_file = (path.parent / cfg.template.file).resolve()
        if not template_file.is_file():
            raise ConfigError(f"Template file not found: {template_file}")
        cfg.template_path = str(template_file)
        cfg.template = template_file.read_text(encoding="utf-8")
        logger.debug("template loaded from %s", template_file)

    _validate(cfg)
    return cfg


__all__ = ["DEFAULT_CONFIG_FILE", "load_config", "compile_regexps"]
