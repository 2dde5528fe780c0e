"""Built-in Staticmark plugins."""

from __future__ import annotations

from . import frontmatter, markdown, static

BUILTIN_PLUGINS = (frontmatter, markdown, static)

__all__ = ["BUILTIN_PLUGINS"]
