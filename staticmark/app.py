"""Application bootstrap and context container for Staticmark."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import ConfigError, SiteConfig, load_config
from .plugins import BootstrapContext, build_settings_getter, run_bootstrap


@dataclass(slots=True)
class AppContext:
    """Aggregates the loaded configuration for the CLI lifecycle."""

    config: SiteConfig


def bootstrap(
    config_path: Path | None, *, production: bool | None = None
) -> AppContext:
    """Load configuration and let plugins prepare for a build."""

    # Defer error mapping to the CLI, which knows how to present messages.
    config = load_config(config_path, production=production)

    bootstrap_context = BootstrapContext(
        config=config, get_settings=build_settings_getter(config)
    )
    bootstrap_errors = run_bootstrap(bootstrap_context)
    if bootstrap_errors:
        first_error = bootstrap_errors[0]
        raise ConfigError(f"Plugin bootstrap failed: {first_error}") from first_error

    return AppContext(config=config)
