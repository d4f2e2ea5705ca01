"""
File and package processing: ties the loader, carrier matching, template
rendering and the detection/mutation engine together.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .carrier import match_carrier
from .config.load import compile_regexps
from .config.model import Config
from .config.registry import CarrierRegistry
from .engine.detector import detect
from .engine.directive import GENERATED_MARKER, SKIP_MARKER, has_decl_marker, has_marker, is_generated_header
from .errors import CandidateParseError, TemplateError
from .golang.imports import add_imports, prune_imports
from .golang.printer import render_block
from .golang.range_edits import RangeEditor
from .golang.source import FuncDecl, GoFile, import_local_name, parse_file, parse_statements, requalify_statements
from .packages import resolve_patterns
from .results import FileResult, FunctionAction, FunctionError, ProcessResult
from .syntax.nodes import Node
from .template import StatementTemplate, build_vars, qualified_func_name

logger = logging.getLogger(__name__)


def _uses_crlf(text: str) -> bool:
    """Every line break in `text` is CRLF."""
    return "\r\n" in text and text.count("\n") == text.count("\r\n")


@dataclass
class ProcessOptions:
    test: bool = False
    dry_run: bool = False
    remove: bool = False
    mark_generated: bool = False
    package_only: List[re.Pattern] = field(default_factory=list)
    package_omit: List[re.Pattern] = field(default_factory=list)
    func_types: List[str] = field(default_factory=lambda: ["function", "method"])
    func_scopes: List[str] = field(default_factory=lambda: ["exported", "unexported"])
    func_only: List[re.Pattern] = field(default_factory=list)
    func_omit: List[re.Pattern] = field(default_factory=list)

    @classmethod
    def from_config(cls, cfg: Config, *, dry_run: bool = False, remove: bool = False,
                    test: Optional[bool] = None) -> "ProcessOptions":
        return cls(
            test=cfg.test if test is None else test,
            dry_run=dry_run,
            remove=remove,
            mark_generated=cfg.mark_generated,
            package_only=compile_regexps(cfg.packages.regexps.only, "$.packages.regexps.only"),
            package_omit=compile_regexps(cfg.packages.regexps.omit, "$.packages.regexps.omit"),
            func_types=list(cfg.functions.types),
            func_scopes=list(cfg.functions.scopes),
            func_only=compile_regexps(cfg.functions.regexps.only, "$.functions.regexps.only"),
            func_omit=compile_regexps(cfg.functions.regexps.omit, "$.functions.regexps.omit"),
        )


def _regexp_filter(value: str, only: Sequence[re.Pattern], omit: Sequence[re.Pattern]) -> bool:
    if only and not any(rx.search(value) for rx in only):
        return False
    return not any(rx.search(value) for rx in omit)


class Processor:
    """
    Applies a statement template to the functions of Go files.

    Args:
        registry: Carriers recognized as the first parameter.
        template: Statement template rendered per function.
        imports: Import paths the rendered statements need.
        options: Processing switches and filters.
    """

    def __init__(
        self,
        registry: CarrierRegistry,
        template: StatementTemplate,
        imports: Sequence[str] = (),
        options: Optional[ProcessOptions] = None,
    ):
        self.registry = registry
        self.template = template
        self.imports = list(imports)
        self.options = options or ProcessOptions()

    # ---------- filters ----------

    def accept_file(self, path: Path) -> bool:
        if path.suffix != ".go":
            return False
        if not self.options.test and path.name.endswith("_test.go"):
            return False
        return "testdata" not in path.parts

    def accept_package(self, import_path: str) -> bool:
        return _regexp_filter(import_path, self.options.package_only, self.options.package_omit)

    def accept_function(self, decl: FuncDecl) -> bool:
        kind = "method" if decl.is_method else "function"
        scope = "exported" if decl.is_exported else "unexported"
        if kind not in self.options.func_types or scope not in self.options.func_scopes:
            return False
        return _regexp_filter(decl.name, self.options.func_only, self.options.func_omit)

    # ---------- single file ----------

    def _candidate(self, text: str) -> List[Node]:
        candidate = parse_statements(text)
        if self.options.mark_generated:
            for stmt in candidate:
                if not has_marker(stmt.trivia.trailing, GENERATED_MARKER):
                    stmt.trivia.trailing.append(" //" + GENERATED_MARKER)
        return candidate

    def import_renames(self, gofile: GoFile) -> Dict[str, str]:
        """Default package name -> alias, for configured imports the file aliases."""
        renames: Dict[str, str] = {}
        for spec in gofile.imports:
            if spec.path not in self.imports or spec.name in (None, "_", "."):
                continue
            default = import_local_name(spec.path)
            if spec.name != default:
                renames[default] = spec.name
        return renames

    def _process_func(self, gofile: GoFile, decl: FuncDecl, package_path: str,
                      result: FileResult) -> bool:
        """Returns True if the function body changed."""
        display = qualified_func_name(gofile.package_name, decl)

        if has_decl_marker(decl.comments, SKIP_MARKER):
            logger.debug("%s: skip directive on declaration", display)
            return False
        if not self.accept_function(decl):
            logger.debug("%s: filtered out", display)
            return False

        match = match_carrier(decl.params[0] if decl.params else None, self.registry, gofile.aliases)
        if match is None:
            return False

        vars = build_vars(gofile.package_name, package_path, decl, match)
        try:
            rendered = requalify_statements(self.template.render(vars), self.import_renames(gofile))
            candidate = self._candidate(rendered)
        except (TemplateError, CandidateParseError) as e:
            logger.debug("%s: %s", display, e)
            result.errors.append(FunctionError(function=display, line=decl.line, message=str(e)))
            return False

        action = detect(
            decl.body,
            candidate,
            remove=self.options.remove,
            marker=SKIP_MARKER,
            generated_marker=GENERATED_MARKER if self.options.mark_generated else None,
        )
        logger.debug("%s: %s", display, action.name)
        result.actions.append(FunctionAction(function=display, line=decl.line, action=action.name))
        return action.apply(decl.body, candidate)

    def transform_source(self, text: str, package_path: str, path: str = "") -> FileResult:
        """
        Transform one Go source file.

        The returned FileResult carries the new text in `text`; `modified`
        tells whether it differs from the input. A file written with CRLF line
        endings keeps them.
        """
        result = FileResult(path=path, package_path=package_path, text=text)
        crlf = _uses_crlf(text)
        source = text.replace("\r\n", "\n") if crlf else text
        gofile = parse_file(source)

        if is_generated_header(gofile.header_comments):
            result.skipped = "generated"
            return result
        if has_decl_marker(gofile.header_comments, SKIP_MARKER, file_scope=True):
            result.skipped = "directive"
            return result

        editor = RangeEditor(source)
        for decl in gofile.funcs:
            if self._process_func(gofile, decl, package_path, result):
                body_text = render_block(decl.body, decl.indent + "\t", decl.indent)
                editor.add_replacement(decl.body_start, decl.body_end, body_text, "body")

        if not editor.edits:
            return result

        new_text, stats = editor.apply_edits()
        logger.debug("%s: %d function bodies rewritten", path or package_path, stats["edit_types"].get("body", 0))
        if self.imports:
            if self.options.remove:
                new_text = prune_imports(new_text, self.imports)
            else:
                new_text = add_imports(new_text, self.imports)

        if crlf:
            new_text = new_text.replace("\n", "\r\n")
        result.text = new_text
        result.modified = new_text != text
        return result

    # ---------- packages ----------

    def process_file(self, file: Path, package_path: str) -> FileResult:
        try:
            text = file.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return FileResult(
                path=str(file),
                package_path=package_path,
                errors=[FunctionError(function="", line=0, message=f"failed to read file: {e}")],
            )

        result = self.transform_source(text, package_path, path=str(file))
        if result.modified and result.ok and not self.options.dry_run:
            file.write_bytes(result.text.encode("utf-8"))
        return result

    def process(self, patterns: Sequence[str], root: Path) -> ProcessResult:
        """
        Process every Go file of the packages matched by `patterns`.

        Files with per-function errors are reported but never written.
        """
        dirs, errors = resolve_patterns(list(patterns), root)
        out = ProcessResult(errors=errors)

        for pkg in dirs:
            if not self.accept_package(pkg.import_path):
                logger.debug("package %s: filtered out", pkg.import_path)
                continue
            for file in sorted(pkg.path.iterdir()):
                if not file.is_file() or not self.accept_file(file):
                    continue
                out.files_processed += 1
                result = self.process_file(file, pkg.import_path)
                out.files.append(result)
                if not result.ok:
                    for err in result.errors:
                        where = f"{file}:{err.line}" if err.line else str(file)
                        out.errors.append(f"{where}: {err.function + ': ' if err.function else ''}{err.message}")
                    continue
                if result.modified:
                    out.files_modified += 1
                    logger.info("%s: %s", "would modify" if self.options.dry_run else "modified", file)

        return out


__all__ = ["ProcessOptions", "Processor"]
