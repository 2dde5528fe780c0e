"""Pluggy integration for the built-in static adapter."""

from __future__ import annotations

from staticmark.config import SiteConfig
from staticmark.plugins import AdapterContribution, hookimpl

from .adapter import adapt_static
from .config import ADAPTER_ID


@hookimpl
def adapters(config: SiteConfig) -> tuple[AdapterContribution, ...]:
    """Expose the built-in static adapter as a plugin contribution."""

    contribution = AdapterContribution(
        adapter_id=ADAPTER_ID,
        handler=adapt_static,
        description="Static files for any static host",
    )
    return (contribution,)


__all__ = ["adapters"]
