"""Shared helpers for Staticmark CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from ..app import AppContext, bootstrap
from ..config import ConfigError, MissingConfigError

CONTEXT_SETTINGS: dict[str, Any] = {"help_option_names": ["-h", "--help"]}


class StaticmarkCliError(click.ClickException):
    """Shared Click exception wrapper for CLI failures."""


def warn(message: str) -> None:
    """Report a non-fatal build problem on stderr."""

    click.secho(f"warning: {message}", err=True, fg="yellow")


def get_app(ctx: click.Context, *, production: bool | None = None) -> AppContext:
    """Return a cached AppContext for the current CLI invocation."""

    app: AppContext | None = ctx.obj.get("app")
    if app is not None and production is None:
        return app

    config_path_opt: Path | None = ctx.obj.get("config_path")

    try:
        app = bootstrap(config_path_opt, production=production)
    except MissingConfigError as exc:
        raise StaticmarkCliError(
            f"{exc}. Run 'staticmark config' once to create one."
        ) from exc
    except ConfigError as exc:
        raise StaticmarkCliError(str(exc)) from exc

    ctx.obj["app"] = app
    return app
