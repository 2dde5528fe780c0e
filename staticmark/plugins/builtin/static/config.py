"""Configuration helpers for the built-in static adapter."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from staticmark.config import SiteConfig

PLUGIN_ID = "staticmark-builtin-static"
ADAPTER_ID = "static"
PRECOMPRESS_SUFFIXES = (".html", ".css", ".js", ".json", ".svg", ".xml")


@dataclass(frozen=True)
class StaticAdapterConfig:
    """Resolved output locations and switches for the static adapter."""

    pages_dir: Path
    assets_dir: Path
    static_dir: Path
    fallback: str | None
    precompress: bool
    strict: bool


def resolve_adapter_config(config: SiteConfig) -> StaticAdapterConfig:
    """Convert site configuration into static adapter configuration."""

    options = config.kit.adapter
    return StaticAdapterConfig(
        pages_dir=(config.root_dir / options.pages).resolve(),
        assets_dir=(config.root_dir / options.assets).resolve(),
        static_dir=config.static_dir,
        fallback=options.fallback,
        precompress=options.precompress,
        strict=options.strict,
    )


__all__ = [
    "ADAPTER_ID",
    "PLUGIN_ID",
    "PRECOMPRESS_SUFFIXES",
    "StaticAdapterConfig",
    "resolve_adapter_config",
]
