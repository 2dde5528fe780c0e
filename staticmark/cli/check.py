"""Check command for Staticmark CLI."""

from __future__ import annotations

import click

from ..errors import BuildError
from ..services.build import check_site
from ._common import StaticmarkCliError, get_app


@click.command(name="check")
@click.pass_context
def check(ctx: click.Context) -> None:
    """Verify every code block language is configured for highlighting."""

    app = get_app(ctx)
    config = app.config

    try:
        missing = check_site(config)
    except BuildError as exc:
        raise StaticmarkCliError(str(exc)) from exc

    if not missing:
        languages = ", ".join(config.markdown.highlight.languages)
        click.echo(f"All code blocks use configured languages ({languages}).")
        return

    click.echo("Code blocks with unconfigured languages:\n")
    for src_uri, lang in missing:
        click.echo(f"  - {src_uri}: {lang}")
    ctx.exit(1)


def register(cli: click.Group) -> None:
    """Register the command with the root CLI group."""

    cli.add_command(check)
