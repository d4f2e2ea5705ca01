"""
Go import block maintenance: adding required imports and pruning unused ones.

New imports are grouped the way goimports lays them out: standard library
packages first, then a blank line, then everything else.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set

from tree_sitter import Node as TSNode

from .convert import named
from .document import GoDocument
from .range_edits import RangeEditor
from .source import ImportSpec, read_imports

logger = logging.getLogger(__name__)


def is_stdlib(path: str) -> bool:
    """Standard library import paths have no domain in the first segment."""
    return "." not in path.split("/")[0]


def _quote(path: str) -> str:
    return f'"{path}"'


def _format_group(specs: Iterable[str]) -> List[str]:
    return [f"\t{s}" for s in specs]


def format_import_decl(std: Sequence[str], other: Sequence[str]) -> str:
    """Import declaration text for already formatted spec strings."""
    if len(std) + len(other) == 1:
        return f"import {(list(std) + list(other))[0]}"
    lines = ["import ("]
    lines.extend(_format_group(std))
    if std and other:
        lines.append("")
    lines.extend(_format_group(other))
    lines.append(")")
    return "\n".join(lines)


def _spec_path(doc: GoDocument, spec: TSNode) -> str:
    path_node = spec.child_by_field_name("path")
    return doc.get_node_text(path_node)[1:-1] if path_node is not None else ""


def _spec_list(decl: TSNode) -> Optional[TSNode]:
    return next((c for c in decl.named_children if c.type == "import_spec_list"), None)


def _list_specs(spec_list: TSNode) -> List[TSNode]:
    return [c for c in named(spec_list) if c.type == "import_spec"]


def _insert_into_list(doc: GoDocument, editor: RangeEditor, spec_list: TSNode,
                      std: List[str], other: List[str]) -> bool:
    """Insert specs into a parenthesized list laid out one spec per line."""
    specs = _list_specs(spec_list)
    open_row = spec_list.start_point[0]
    close_row = spec_list.end_point[0]
    if specs and (specs[0].start_point[0] == open_row or specs[-1].end_point[0] == close_row):
        return False
    if not specs and open_row == close_row:
        return False

    existing_std = [s for s in specs if is_stdlib(_spec_path(doc, s))]
    existing_other = [s for s in specs if not is_stdlib(_spec_path(doc, s))]
    # row -> lines inserted before it; both groups may land on the same row
    inserts: Dict[int, List[str]] = {}

    def merge_into(group: List[TSNode], new: List[str]) -> None:
        # keep the group sorted the way gofmt leaves it
        for spec in new:
            after = next((s for s in group if _quote(_spec_path(doc, s)) > spec), None)
            row = after.start_point[0] if after is not None else group[-1].end_point[0] + 1
            inserts.setdefault(row, []).append(f"\t{spec}")

    if std:
        if existing_std:
            merge_into(existing_std, std)
        else:
            lines = _format_group(std)
            if specs:
                lines.append("")
            inserts.setdefault(open_row + 1, []).extend(lines)

    if other:
        if existing_other:
            merge_into(existing_other, other)
        else:
            lines = _format_group(other)
            if specs:
                lines.insert(0, "")
            inserts.setdefault(close_row, []).extend(lines)

    for row, lines in inserts.items():
        editor.add_insertion(doc.line_start_char(row), "\n".join(lines) + "\n", "import")
    return True


def _split(paths: Iterable[str]) -> tuple[List[str], List[str]]:
    std = sorted(_quote(p) for p in paths if is_stdlib(p))
    other = sorted(_quote(p) for p in paths if not is_stdlib(p))
    return std, other


def add_imports(text: str, paths: Sequence[str]) -> str:
    """
    Add import specs for `paths` that the file does not import yet.

    Args:
        text: Go source.
        paths: Import paths required by the inserted statements.

    Returns:
        Updated source (unchanged when nothing was missing).
    """
    doc = GoDocument(text)
    existing = {spec.path for spec in read_imports(doc)}
    missing = [p for p in dict.fromkeys(paths) if p and p not in existing]
    if not missing:
        return text

    logger.debug("adding imports: %s", ", ".join(missing))
    std, other = _split(missing)
    editor = RangeEditor(text)
    decls = doc.get_children_by_type(doc.root_node, "import_declaration")

    grouped = next((d for d in decls if _spec_list(d) is not None), None)
    if grouped is not None and _insert_into_list(doc, editor, _spec_list(grouped), std, other):
        return editor.apply_edits()[0]

    if decls:
        # Rewrite the first declaration in parenthesized form
        decl = grouped if grouped is not None else decls[0]
        spec_nodes = _list_specs(_spec_list(decl)) if _spec_list(decl) is not None else [
            c for c in named(decl) if c.type == "import_spec"
        ]
        cur_std = [doc.get_node_text(s) for s in spec_nodes if is_stdlib(_spec_path(doc, s))]
        cur_other = [doc.get_node_text(s) for s in spec_nodes if not is_stdlib(_spec_path(doc, s))]
        start, end = doc.get_node_range(decl)
        editor.add_replacement(start, end, format_import_decl(cur_std + std, cur_other + other), "import")
        return editor.apply_edits()[0]

    clauses = doc.get_children_by_type(doc.root_node, "package_clause")
    if not clauses:
        raise ValueError("Go source has no package clause")
    _, end = doc.get_node_range(clauses[0])
    editor.add_insertion(end, "\n\n" + format_import_decl(std, other), "import")
    return editor.apply_edits()[0]


def _normalize_blank_lines(lines: List[str]) -> List[str]:
    out: List[str] = []
    for line in lines:
        if not line.strip() and (not out or not out[-1].strip()):
            continue
        out.append(line)
    while out and not out[-1].strip():
        out.pop()
    return out


def referenced_packages(doc: GoDocument) -> Set[str]:
    """Operands of package-qualified references (`pkg.Name`) in the file."""
    return {doc.get_node_text(n) for n in doc.query_nodes("package_refs", "package")}


def prune_imports(text: str, paths: Sequence[str]) -> str:
    """
    Remove imports of `paths` whose package name is no longer referenced.

    Blank (`_`) and dot imports are never removed.
    """
    doc = GoDocument(text)
    used = referenced_packages(doc)
    targets = set(paths)
    lines = text.split("\n")
    editor = RangeEditor(text)

    for decl in doc.get_children_by_type(doc.root_node, "import_declaration"):
        spec_list = _spec_list(decl)
        spec_nodes = _list_specs(spec_list) if spec_list is not None else [
            c for c in named(decl) if c.type == "import_spec"
        ]
        unused = []
        for node in spec_nodes:
            name_node = node.child_by_field_name("name")
            spec = ImportSpec(
                path=_spec_path(doc, node),
                name=doc.get_node_text(name_node) if name_node is not None else None,
            )
            if spec.path in targets and spec.local_name and spec.local_name not in used:
                unused.append(node)
        if not unused:
            continue

        logger.debug("pruning imports: %s", ", ".join(_spec_path(doc, n) for n in unused))
        start_row, end_row = decl.start_point[0], decl.end_point[0]

        if len(unused) == len(spec_nodes):
            # Drop the whole declaration with the blank line that separated it
            last = end_row + 1
            if last < len(lines) and not lines[last].strip():
                last += 1
            editor.add_deletion(doc.line_start_char(start_row), doc.line_start_char(min(last, len(lines))), "import")
            continue

        open_row, close_row = spec_list.start_point[0], spec_list.end_point[0]
        removed_rows = set()
        for node in unused:
            removed_rows.update(range(node.start_point[0], node.end_point[0] + 1))
        if open_row in removed_rows or close_row in removed_rows:
            # Specs share a line with the parentheses; drop the spec text only
            for node in unused:
                s, e = doc.get_node_range(node)
                editor.add_deletion(s, e, "import")
            continue

        inner = [lines[r] for r in range(open_row + 1, close_row) if r not in removed_rows]
        inner = _normalize_blank_lines(inner)
        replacement = "".join(line + "\n" for line in inner)
        editor.add_replacement(doc.line_start_char(open_row + 1), doc.line_start_char(close_row), replacement, "import")

    return editor.apply_edits()[0]


__all__ = ["is_stdlib", "format_import_decl", "add_imports", "prune_imports", "referenced_packages"]
