"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from CtxWeaverUserError.

Programming errors and bugs should NOT inherit from CtxWeaverUserError;
they will propagate with full tracebacks.
"""

from __future__ import annotations


class CtxWeaverUserError(Exception):
    """
    Base class for all user-facing errors in ctxweaver.

    These errors indicate problems that the user can fix:
    configuration issues, broken templates, failing hooks, etc.
    """
    pass


class ConfigError(CtxWeaverUserError):
    """Configuration file could not be loaded or failed validation."""
    pass


class TemplateError(CtxWeaverUserError):
    """Statement template has a syntax error or failed to render."""
    pass


class CandidateParseError(CtxWeaverUserError):
    """Rendered template text is not a valid Go statement sequence."""

    def __init__(self, message: str, text: str = ""):
        super().__init__(message)
        self.text = text


class EmptyCandidateError(CandidateParseError):
    """Rendered template text contains no statements."""
    pass


class HookError(CtxWeaverUserError):
    """A pre/post hook command exited with a non-zero status."""

    def __init__(self, command: str, returncode: int, phase: str = ""):
        prefix = f"{phase} hook" if phase else "hook"
        super().__init__(f"{prefix} failed (exit {returncode}): {command}")
        self.command = command
        self.returncode = returncode
        self.phase = phase


class BoundsError(AssertionError):
    """Mutator range does not fit the block. Indicates a bug in the caller."""
    pass


__all__ = [
    "CtxWeaverUserError",
    "ConfigError",
    "TemplateError",
    "CandidateParseError",
    "EmptyCandidateError",
    "HookError",
    "BoundsError",
]
