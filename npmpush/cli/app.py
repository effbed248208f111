from __future__ import annotations

import typer

from npmpush import __version__
from npmpush.cli.commands.publish_cmd import publish, show


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Publish npm packages with version bump, changelog and rollback.",
)

app.command()(publish)
app.command()(show)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    del version


def main() -> None:
    app()
