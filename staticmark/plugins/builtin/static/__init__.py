"""Built-in static adapter plugin for Staticmark."""

from __future__ import annotations

from .adapter import StaticAdapter, adapt_static
from .config import (
    ADAPTER_ID,
    PLUGIN_ID,
    StaticAdapterConfig,
    resolve_adapter_config,
)
from .plugin import adapters

__all__ = [
    "ADAPTER_ID",
    "PLUGIN_ID",
    "StaticAdapter",
    "StaticAdapterConfig",
    "adapt_static",
    "adapters",
    "resolve_adapter_config",
]
