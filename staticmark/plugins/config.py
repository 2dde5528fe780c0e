"""Per-plugin settings read from the ``[plugins.<id>]`` tables."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from ..config import SiteConfig
from .types import PluginSettingsGetter

_EMPTY_MAPPING: Mapping[str, Any] = MappingProxyType({})


def build_settings_getter(config: SiteConfig) -> PluginSettingsGetter:
    """Return a callable handing each plugin a read-only view of its table.

    Keys given in ``default`` are filled in underneath the configured values,
    so a plugin can declare its defaults at the call site.
    """

    tables = {
        plugin_id.lower(): dict(table)
        for plugin_id, table in config.plugins.items()
        if isinstance(table, Mapping)
    }

    def get_settings(
        plugin_id: str,
        *,
        default: Mapping[str, Any] | None = None,
    ) -> Mapping[str, Any]:
        configured = tables.get(plugin_id.lower())
        if configured is None and default is None:
            return _EMPTY_MAPPING
        return MappingProxyType({**(default or {}), **(configured or {})})

    return get_settings


__all__ = ["build_settings_getter"]
