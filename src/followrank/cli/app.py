"""Typer main application for the followrank CLI."""

from __future__ import annotations

import typer
from rich.console import Console

from followrank import __version__
from followrank.cli.commands import rank
from followrank.core import setup_logging

console = Console()

app = typer.Typer(
    name="followrank",
    help="Follower graph influence ranking",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.add_typer(rank.app, name="rank", help="PageRank ranking commands")


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        console.print(f"[bold blue]followrank[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """
    followrank - rank accounts by influence in their follower graph.
    """
    setup_logging()


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
