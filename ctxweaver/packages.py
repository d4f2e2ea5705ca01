"""
Go package pattern resolution without the go toolchain.

Supported patterns: `.`, `./dir`, `./...`, `./dir/...`, absolute directories,
and import paths under the current module (`example.com/mod/pkg/...`).
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

_MODULE_RE = re.compile(r"^\s*module\s+(\"[^\"]+\"|\S+)", re.MULTILINE)


@dataclass(frozen=True)
class GoPackageDir:
    path: Path
    import_path: str


def read_module_path(go_mod: Path) -> Optional[str]:
    m = _MODULE_RE.search(go_mod.read_text(encoding="utf-8"))
    if not m:
        return None
    return m.group(1).strip('"')


def find_module(start: Path) -> Tuple[Optional[Path], Optional[str]]:
    """Nearest enclosing go.mod: (module root, module path), or (None, None)."""
    for d in [start, *start.parents]:
        go_mod = d / "go.mod"
        if go_mod.is_file():
            return d, read_module_path(go_mod)
    return None, None


def _skip_dir(name: str) -> bool:
    return name in ("testdata", "vendor") or name.startswith(("_", "."))


def _has_go_files(d: Path) -> bool:
    return any(p.suffix == ".go" and p.is_file() for p in d.iterdir())


def _walk(base: Path) -> Iterator[Path]:
    for dirpath, dirnames, _files in os.walk(base):
        current = Path(dirpath)
        # nested modules are separate units
        dirnames[:] = sorted(
            n for n in dirnames
            if not _skip_dir(n) and not (current / n / "go.mod").is_file()
        )
        yield current


def import_path_for(d: Path, module_root: Optional[Path], module_path: Optional[str]) -> str:
    if module_root is None or not module_path:
        return d.name
    rel = d.resolve().relative_to(module_root.resolve()).as_posix()
    return module_path if rel == "." else f"{module_path}/{rel}"


def resolve_patterns(patterns: List[str], root: Path) -> Tuple[List[GoPackageDir], List[str]]:
    """
    Resolve package patterns relative to `root`.

    Returns:
        (package directories in pattern order without duplicates, error messages)
    """
    root = root.resolve()
    module_root, module_path = find_module(root)
    seen = set()
    dirs: List[GoPackageDir] = []
    errors: List[str] = []

    for pattern in patterns:
        recursive = pattern == "..." or pattern.endswith("/...")
        base_str = pattern[:-3].rstrip("/") if recursive else pattern
        if not base_str:
            base_str = "."

        if module_path and (base_str == module_path or base_str.startswith(module_path + "/")):
            base = module_root / base_str[len(module_path):].lstrip("/")
        else:
            base = Path(base_str) if os.path.isabs(base_str) else root / base_str
        base = base.resolve()

        if not base.is_dir():
            errors.append(f"pattern {pattern!r}: directory not found: {base}")
            continue

        candidates = list(_walk(base)) if recursive else [base]
        matched = False
        for d in candidates:
            if not _has_go_files(d):
                continue
            matched = True
            if d in seen:
                continue
            seen.add(d)
            dirs.append(GoPackageDir(d, import_path_for(d, module_root, module_path)))
        if not matched:
            logger.warning("pattern %r matched no packages", pattern)

    return dirs, errors


__all__ = ["GoPackageDir", "find_module", "read_module_path", "import_path_for", "resolve_patterns"]
