"""
Pre/post hook execution: shell commands run in order, stopping at the first failure.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Callable, Optional, Sequence

from .errors import HookError

logger = logging.getLogger(__name__)


def run_hooks(
    phase: str,
    commands: Sequence[str],
    cwd: Optional[Path] = None,
    echo: Optional[Callable[[str], None]] = None,
) -> None:
    """
    Run hook commands through `sh -c`.

    Args:
        phase: "pre" or "post", used in messages.
        commands: Shell commands in execution order.
        cwd: Working directory (process cwd when None).
        echo: Called with each command before it runs.

    Raises:
        HookError: A command exited non-zero; later commands are not run.
    """
    for command in commands:
        if echo is not None:
            echo(command)
        logger.debug("%s hook: %s", phase, command)
        proc = subprocess.run(["sh", "-c", command], cwd=str(cwd) if cwd else None)
        if proc.returncode != 0:
            raise HookError(command, proc.returncode, phase)


__all__ = ["run_hooks"]
