"""Sources management commands."""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config import Config, SourceConfig, save_sources
from ..models import ReliabilityTier

console = Console()
sources_app = typer.Typer(help="Manage news sources")


@sources_app.command("list")
def sources_list() -> None:
    """List all configured sources."""
    config = Config()
    sources = config.sources

    if not sources:
        console.print("[yellow]No sources configured. Run 'newsmerge init' first.[/yellow]")
        return

    table = Table(title="Configured Sources")
    table.add_column("Name", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Reliability", style="green")
    table.add_column("Priority", style="bold")
    table.add_column("Enabled", style="yellow")
    table.add_column("URL", style="blue")

    for source in sorted(sources, key=lambda s: (s.priority, s.name)):
        table.add_row(
            source.name,
            source.kind,
            source.reliability.value,
            str(source.priority),
            "✓" if source.enabled else "✗",
            source.feed_url or source.url,
        )

    console.print(table)


@sources_app.command("add")
def sources_add(
    name: str = typer.Option(..., "--name", "-n", help="Source name"),
    url: str = typer.Option(..., "--url", "-u", help="Homepage URL"),
    feed_url: Optional[str] = typer.Option(None, "--feed-url", "-f", help="RSS feed URL"),
    reliability: ReliabilityTier = typer.Option(
        ReliabilityTier.LOW,
        "--reliability",
        "-r",
        help="Reliability tier",
        case_sensitive=False,
    ),
    priority: int = typer.Option(2, "--priority", "-p", help="Priority (1 = highest)", min=1, max=3),
) -> None:
    """Add a new source."""
    config = Config()
    sources = list(config.sources)

    if any(s.name == name for s in sources):
        console.print(f"[red]Source '{name}' already exists.[/red]")
        raise typer.Exit(1)

    sources.append(
        SourceConfig(
            name=name,
            url=url,
            kind="rss" if feed_url else "website",
            feed_url=feed_url,
            reliability=reliability,
            priority=priority,
        )
    )
    save_sources(sources, config.sources_path)

    console.print(f"[green]✅ Added source: {name}[/green]")


@sources_app.command("remove")
def sources_remove(
    name: str = typer.Argument(..., help="Source name to remove"),
) -> None:
    """Remove a source."""
    config = Config()
    sources = config.sources
    remaining = [s for s in sources if s.name != name]

    if len(remaining) == len(sources):
        console.print(f"[red]Source '{name}' not found.[/red]")
        raise typer.Exit(1)

    save_sources(remaining, config.sources_path)
    console.print(f"[green]✅ Removed source: {name}[/green]")
