from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_CONFIG_FILE, CarrierRegistry, Config, load_config
from .errors import CtxWeaverUserError
from .hooks import run_hooks
from .processor import ProcessOptions, Processor
from .results import ProcessResult
from .template import StatementTemplate
from .version import tool_version

_LOG_FORMAT = "[%(levelname)s] %(message)s"


class Colors:
    RESET = "\033[0m"
    CYAN = "\033[36m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    DIM = "\033[2m"


def _color(stream, code: str) -> str:
    """ANSI code when the stream is a terminal, otherwise nothing."""
    isatty = getattr(stream, "isatty", None)
    return code if isatty is not None and isatty() else ""


def _out(code: str) -> str:
    return _color(sys.stdout, code)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ctxweaver",
        description="Insert, refresh or remove context-aware statements at the top of Go functions",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument(
        "patterns",
        nargs="*",
        help="Go package patterns (./..., ./pkg, .); default: packages.patterns from the config",
    )
    p.add_argument("--config", default=DEFAULT_CONFIG_FILE, help="config file path (default: %(default)s)")
    p.add_argument("--dry-run", action="store_true", help="report changes without writing files")
    p.add_argument("--verbose", action="store_true", help="log per-function decisions")
    p.add_argument("--silent", action="store_true", help="print errors only")
    p.add_argument(
        "--test",
        action="store_true",
        default=None,
        help="also process *_test.go files (overrides the config)",
    )
    p.add_argument("--remove", action="store_true", help="remove matching statements instead of inserting")
    p.add_argument("--no-hooks", action="store_true", help="skip pre/post hooks")
    p.add_argument("--json", action="store_true", help="print the result as JSON")
    return p


def _setup_logging(verbose: bool, silent: bool) -> None:
    level = logging.ERROR if silent else (logging.DEBUG if verbose else logging.INFO)
    logger = logging.getLogger("ctxweaver")
    for h in list(logger.handlers):
        if getattr(h, "_ctxweaver_cli", False):
            logger.removeHandler(h)
    h = logging.StreamHandler(sys.stderr)
    h.setFormatter(logging.Formatter(_LOG_FORMAT))
    h._ctxweaver_cli = True  # type: ignore[attr-defined]
    logger.addHandler(h)
    logger.setLevel(level)


def _patterns(ns: argparse.Namespace, cfg: Config) -> List[str]:
    patterns = list(ns.patterns) or list(cfg.packages.patterns)
    if not patterns:
        raise CtxWeaverUserError("no patterns specified: use command line args or packages.patterns in config")
    return patterns


def _hooks(phase: str, commands: List[str], quiet: bool) -> None:
    if not commands:
        return
    if not quiet:
        sys.stdout.write(f"{_out(Colors.YELLOW)}▶ {phase}{_out(Colors.RESET)}\n")

    def echo(cmd: str) -> None:
        if not quiet:
            sys.stdout.write(f"  {_out(Colors.DIM)}$ {cmd}{_out(Colors.RESET)}\n")
            sys.stdout.flush()

    run_hooks(phase, commands, echo=echo)


def _report(result: ProcessResult, ns: argparse.Namespace) -> None:
    if ns.json:
        sys.stdout.write(json.dumps(result.model_dump(mode="json"), ensure_ascii=False) + "\n")
    elif not ns.silent:
        if ns.verbose or ns.dry_run:
            sys.stdout.write(f"  Files processed: {result.files_processed}\n")
            sys.stdout.write(f"  Files modified: {result.files_modified}\n")
        else:
            sys.stdout.write(
                f"  {_out(Colors.GREEN)}✓{_out(Colors.RESET)} "
                f"{result.files_processed} files processed, {result.files_modified} modified\n"
            )

    if result.errors:
        sys.stderr.write("Errors:\n")
        for e in result.errors:
            sys.stderr.write(f"  {e}\n")


def run(ns: argparse.Namespace) -> int:
    cfg = load_config(Path(ns.config))
    patterns = _patterns(ns, cfg)
    quiet = ns.silent or ns.json
    hooks = not ns.no_hooks

    if hooks:
        _hooks("pre", cfg.hooks.pre, quiet)

    template = StatementTemplate.parse(cfg.template_text)
    processor = Processor(
        CarrierRegistry.from_config(cfg.carriers_cfg),
        template,
        cfg.imports,
        ProcessOptions.from_config(cfg, dry_run=ns.dry_run, remove=ns.remove, test=ns.test),
    )

    if not quiet:
        action = "removing" if ns.remove else "weaving"
        sys.stdout.write(
            f"{_out(Colors.CYAN)}▶ ctxweaver{_out(Colors.RESET)} "
            f"{_out(Colors.DIM)}{action} {' '.join(patterns)}{_out(Colors.RESET)}\n"
        )

    result = processor.process(patterns, Path.cwd())
    _report(result, ns)
    if not result.ok:
        raise CtxWeaverUserError(f"{len(result.errors)} error(s) occurred")

    if hooks:
        _hooks("post", cfg.hooks.post, quiet)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.verbose, ns.silent)

    try:
        return run(ns)
    except CtxWeaverUserError as e:
        sys.stderr.write(
            f"{_color(sys.stderr, Colors.RED)}ctxweaver: {str(e).rstrip()}{_color(sys.stderr, Colors.RESET)}\n"
        )
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
