"""
Go source support built on tree-sitter: loading, printing and import upkeep.
"""

from __future__ import annotations

from .document import GoDocument
from .convert import Converter
from .source import (
    FuncDecl,
    GoFile,
    ImportSpec,
    Receiver,
    import_local_name,
    parse_file,
    parse_statements,
)
from .printer import render_block
from .imports import add_imports, prune_imports

__all__ = [
    "GoDocument",
    "Converter",
    "FuncDecl",
    "GoFile",
    "ImportSpec",
    "Receiver",
    "import_local_name",
    "parse_file",
    "parse_statements",
    "render_block",
    "add_imports",
    "prune_imports",
]
