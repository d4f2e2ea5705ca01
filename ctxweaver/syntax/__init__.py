from __future__ import annotations

from . import nodes
from .nodes import *  # noqa: F401,F403

__all__ = list(nodes.__all__)
