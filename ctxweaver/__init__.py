"""
ctxweaver: keeps context-aware statements at the top of Go functions in sync
with a single template.
"""

from .version import tool_version

__version__ = tool_version()

__all__ = ["__version__"]
