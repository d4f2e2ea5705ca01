"""
Shared test infrastructure for ctxweaver.

Modules:
- file_utils: creating files and small Go modules on disk
- go_utils: parsing snippets into blocks and candidate statements
"""

from .file_utils import write, write_go_module
from .go_utils import DEFAULT_IMPORTS, DEFAULT_TEMPLATE, block_of, candidate, func_file, stmt, transform

__all__ = [
    "DEFAULT_IMPORTS",
    "DEFAULT_TEMPLATE",
    "write",
    "write_go_module",
    "block_of",
    "candidate",
    "func_file",
    "stmt",
    "transform",
]
