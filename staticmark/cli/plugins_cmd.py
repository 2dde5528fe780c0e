"""Plugins command for Staticmark CLI."""

from __future__ import annotations

import click

from ..errors import BuildError
from ..services.build import get_adapter_descriptions, get_preprocessor_descriptions
from ._common import StaticmarkCliError, get_app


@click.command(name="plugins")
@click.pass_context
def plugins(ctx: click.Context) -> None:
    """List available preprocessors and adapters."""

    app = get_app(ctx)

    try:
        sections = (
            ("Preprocessors", get_preprocessor_descriptions(app.config)),
            ("Adapters", get_adapter_descriptions(app.config)),
        )
    except BuildError as exc:
        raise StaticmarkCliError(str(exc)) from exc

    for title, descriptions in sections:
        click.echo(f"{title}:\n")
        if not descriptions:
            click.echo("  (none)")
        for name, desc in descriptions:
            if desc:
                click.echo(f"  - {name}: {desc}")
            else:
                click.echo(f"  - {name}")
        click.echo("")


def register(cli: click.Group) -> None:
    """Register the command with the root CLI group."""

    cli.add_command(plugins)
