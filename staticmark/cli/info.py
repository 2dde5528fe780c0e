"""Info command for Staticmark CLI."""

from __future__ import annotations

import click

from ..config import SiteConfig, resolve_base_path
from ._common import get_app


@click.command(name="info")
@click.pass_context
def info(ctx: click.Context) -> None:
    """Display the resolved site configuration."""

    app = get_app(ctx)
    config: SiteConfig = app.config

    click.echo("Staticmark site info:\n")
    for label, value in _summary(config):
        click.echo(f"  {label:<18}: {value}")


def _summary(config: SiteConfig) -> list[tuple[str, str]]:
    adapter = config.kit.adapter
    highlight = config.markdown.highlight
    prerender = config.kit.prerender
    production_base = resolve_base_path(config.kit.base_path, True) or "(root)"
    development_base = resolve_base_path(config.kit.base_path, False) or "(root)"
    mode = "production" if config.production else "development"

    return [
        ("Config file", str(config.source_path)),
        ("Title", config.title),
        ("Mode", mode),
        ("Extensions", ", ".join(config.extensions)),
        ("Preprocessors", " -> ".join(config.preprocess)),
        ("Markdown", ", ".join(config.markdown.extensions)),
        ("Math", "on" if config.markdown.math else "off"),
        ("Theme", highlight.theme),
        ("Languages", ", ".join(highlight.languages)),
        ("Adapter", adapter.name),
        ("Output", f"pages: {adapter.pages}, assets: {adapter.assets}"),
        ("Base (production)", production_base),
        ("Base (development)", development_base),
        ("Missing ids", prerender.handle_missing_id),
        ("HTTP errors", prerender.handle_http_error),
    ]


def register(cli: click.Group) -> None:
    """Register the command with the root CLI group."""

    cli.add_command(info)
