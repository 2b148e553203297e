from __future__ import annotations

import typer

from cherry import __version__
from cherry.cli.commands.build import build
from cherry.cli.commands.changelog import changelog
from cherry.cli.commands.release import release
from cherry.cli.commands.test import test


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(build)
app.command()(test)
app.command()(changelog)
app.command()(release)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)


def main() -> None:
    app()
