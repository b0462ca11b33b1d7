"""PageRank ranking commands for followrank."""

from __future__ import annotations

import asyncio
import json
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from followrank.core.config import get_settings
from followrank.graph import (
    InfluenceRankingService,
    RankingOutcome,
    RankingStorage,
    selection_from_followers,
    top_scores,
)
from followrank.storage import Account, Database

console = Console()
app = typer.Typer(
    name="rank",
    help="PageRank ranking commands",
    no_args_is_help=True,
)


def _parse_handles(value: str | None) -> list[str]:
    if not value:
        return []
    return [h.strip() for h in value.split(",") if h.strip()]


async def _compute(database_url: str | None, selected: list[str]) -> RankingOutcome:
    settings = get_settings()
    database = Database(database_url or settings.database_url)
    try:
        service = InfluenceRankingService.from_settings(database, settings)
        return await service.calculate(selected)
    finally:
        await database.close()


async def _load_top(database_url: str | None, limit: int) -> list[Account]:
    database = Database(database_url)
    try:
        return list(await RankingStorage(database).get_top_scores(limit=limit))
    finally:
        await database.close()


@app.command("compute")
def compute(
    select: Optional[str] = typer.Option(
        None,
        "--select",
        "-s",
        help="Comma-separated follower handles to restrict the graph to",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the raw result object as JSON",
    ),
    database_url: Optional[str] = typer.Option(
        None,
        "--database-url",
        help="Override the configured database URL",
    ),
) -> None:
    """
    Compute PageRank scores over the follower graph.

    Without --select the global ranking is computed and written back.

    Example:
        followrank rank compute
        followrank rank compute --select "alice,bob"
    """
    selected = _parse_handles(select)
    outcome = asyncio.run(_compute(database_url, selected))

    if as_json:
        typer.echo(json.dumps(outcome.to_dict()))
        if not outcome.success:
            raise typer.Exit(1)
        return

    if not outcome.success:
        console.print(f"[red]PageRank calculation failed: {escape(outcome.error or '')}[/red]")
        raise typer.Exit(1)

    stats = outcome.stats
    selected_label = selection_from_followers(selected).describe()
    console.print(Panel(
        f"Selected followers: [cyan]{selected_label}[/cyan]",
        title="PageRank",
    ))

    table = Table(title="PageRank Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Total Nodes", f"{stats.nodes:,}")
    table.add_row("Relationships", f"{stats.relationships:,}")
    table.add_row("Iterations", f"{stats.iterations:,}")
    console.print(table)

    if outcome.scores:
        top_table = Table(title="Top Accounts")
        top_table.add_column("Rank", justify="right", style="dim")
        top_table.add_column("Username", style="cyan")
        top_table.add_column("Score", justify="right", style="yellow")
        leaders = top_scores(outcome.scores, get_settings().report_top_n)
        for i, (username, score) in enumerate(leaders, start=1):
            top_table.add_row(f"#{i}", f"@{username}", f"{score:.2f}")
        console.print(top_table)


@app.command("top")
def top(
    limit: int = typer.Option(
        20,
        "--top",
        "-t",
        help="Number of top accounts to show",
        min=1,
        max=1000,
    ),
    database_url: Optional[str] = typer.Option(
        None,
        "--database-url",
        help="Override the configured database URL",
    ),
) -> None:
    """
    Show accounts with the highest stored PageRank scores.

    Example:
        followrank rank top --top 50
    """
    accounts = asyncio.run(_load_top(database_url, limit))

    if not accounts:
        console.print("[yellow]No stored PageRank scores. Run 'rank compute' first.[/yellow]")
        return

    table = Table(title="Top Ranked Accounts")
    table.add_column("Rank", justify="right", style="dim")
    table.add_column("Username", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("PageRank", justify="right", style="yellow")
    table.add_column("Followers", justify="right", style="magenta")

    for i, account in enumerate(accounts, start=1):
        table.add_row(
            f"#{i}",
            f"@{account.username}",
            account.full_name or "",
            f"{account.pagerank_score:.2f}",
            f"{account.followers_count:,}",
        )

    console.print(table)
    console.print(f"\n[green]Total: {len(accounts)} accounts[/green]")


if __name__ == "__main__":
    app()
