"""Static documentation and blog site builder."""

from __future__ import annotations

__version__ = "0.1.0"
