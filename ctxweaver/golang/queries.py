"""
Tree-sitter query definitions for Go sources.
"""

from __future__ import annotations

QUERIES = {
    # Top-level functions and methods with a body
    "functions": """
    (function_declaration
      body: (block)) @function

    (method_declaration
      body: (block)) @function
    """,

    # Import specs, with or without a local name
    "imports": """
    (import_spec) @import
    """,

    # Package-qualified references: pkg.Name in expressions and types
    "package_refs": """
    (selector_expression
      operand: (identifier) @package)

    (qualified_type
      package: (package_identifier) @package)
    """,
}
