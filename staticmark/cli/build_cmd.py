"""Build command for Staticmark CLI."""

from __future__ import annotations

from pathlib import Path

import click

from ..errors import BuildError
from ..services.build import build_site, with_destination
from ._common import StaticmarkCliError, get_app, warn


@click.command(name="build")
@click.option(
    "--production/--development",
    "production",
    default=None,
    help="Force the build mode. Defaults to the STATICMARK_ENV variable.",
)
@click.option(
    "-d",
    "--dest",
    "destination",
    type=click.Path(path_type=Path, file_okay=False),
    required=False,
    help="Write pages and assets here instead of the adapter's directories.",
)
@click.pass_context
def build(
    ctx: click.Context, production: bool | None, destination: Path | None
) -> None:
    """Build the static site."""

    app = get_app(ctx, production=production)
    config = app.config

    if destination is not None:
        if destination.exists() and destination.is_file():
            raise StaticmarkCliError("Destination must be a directory path.")
        config = with_destination(config, destination)

    try:
        result = build_site(config, warn=warn)
    except BuildError as exc:
        raise StaticmarkCliError(str(exc)) from exc

    base_display = result.base_path or "/"
    click.echo(
        f"Built {result.pages} pages to {result.output_dir} (base: {base_display})"
    )


def register(cli: click.Group) -> None:
    """Register the command with the root CLI group."""

    cli.add_command(build)
