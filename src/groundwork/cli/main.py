"""Groundwork CLI entry point."""

from __future__ import annotations

import importlib.metadata
from typing import Annotated

import typer

from groundwork.cli.index import index_cmd
from groundwork.cli.search import search_cmd
from groundwork.cli.status import status_cmd


def _installed_version() -> str:
    try:
        return importlib.metadata.version("groundwork")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"groundwork {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="groundwork",
    help=(
        "Groundwork — retrieval context for page databases.\n\n"
        "  groundwork index   Chunk + embed a JSON page export into a snapshot.\n"
        "  groundwork search  Rank indexed chunks for a question."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """Groundwork — retrieval context for page databases."""


app.command("index")(index_cmd)
app.command("search")(search_cmd)
app.command("status")(status_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed Groundwork version."""
    typer.echo(f"groundwork {_installed_version()}")


if __name__ == "__main__":
    app()
