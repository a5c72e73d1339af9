"""Init command implementation."""

from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import ConfigModel, SourceConfig, save_config, save_sources
from ..db import get_connection, init_database, validate_connection
from ..db.sources import SourceStorage
from ..models import ReliabilityTier

console = Console()


def create_default_sources() -> List[SourceConfig]:
    """Create the default Gabonese news sources."""
    high, medium = ReliabilityTier.HIGH, ReliabilityTier.MEDIUM
    return [
        SourceConfig(name="AGP - Agence Gabonaise de Presse", url="https://www.agpgabon.ga", reliability=high, priority=1),
        SourceConfig(name="Gabon Review", url="https://www.gabonreview.com", reliability=high, priority=1),
        SourceConfig(name="L'Union", url="https://www.union.sonapresse.com", reliability=high, priority=1),
        SourceConfig(name="Info241", url="https://info241.com", reliability=medium, priority=1),
        SourceConfig(name="Gabonactu", url="https://gabonactu.com", reliability=medium, priority=2),
        SourceConfig(name="Gabon Media Time", url="https://gabonmediatime.com", reliability=medium, priority=2),
        SourceConfig(name="La Libreville", url="https://lalibreville.com", reliability=medium, priority=2),
        SourceConfig(name="Gabon Matin", url="https://gabonmatin.com", reliability=medium, priority=2),
        SourceConfig(name="Direct Infos Gabon", url="https://directinfosgabon.com", reliability=medium, priority=2),
        SourceConfig(name="Mays-Mouissi", url="https://mays-mouissi.com", reliability=medium, priority=3),
        SourceConfig(
            name="AllAfrica Gabon",
            url="https://fr.allafrica.com/gabon/",
            kind="rss",
            feed_url="https://fr.allafrica.com/tools/headlines/rdf/gabon/headlines.rdf",
            reliability=medium,
            priority=2,
        ),
    ]


def init_command(
    config_dir: Path = typer.Option(
        Path.home() / ".config" / "newsmerge",
        "--config-dir",
        "-c",
        help="Configuration directory",
    ),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("newsmerge", "--db-name", help="Database name"),
    db_user: str = typer.Option("newsmerge", "--db-user", help="Database user"),
    seed_sources: bool = typer.Option(
        True,
        "--seed-sources/--no-seed-sources",
        help="Seed the default news sources",
    ),
) -> None:
    """Initialize newsmerge configuration and database."""
    console.print(Panel.fit("newsmerge - Initialization", style="bold blue"))

    # Create configuration directory
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"
    sources_path = config_dir / "sources.yaml"

    config = ConfigModel(
        postgres={
            "host": db_host,
            "port": db_port,
            "database": db_name,
            "user": db_user,
            "password_env": "NEWSMERGE_DB_PASSWORD",
        },
    )

    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")

    sources = create_default_sources() if seed_sources else []
    save_sources(sources, sources_path)
    console.print(f"✅ Created sources: {sources_path} ({len(sources)} sources)")

    # Validate database connection
    console.print("\n[bold]Testing database connection...[/bold]")
    db_config = config.postgres.model_dump()

    if not validate_connection(db_config):
        console.print(
            "[red]❌ Database connection failed![/red]\n"
            "Please ensure Postgres is running and credentials are correct.\n"
            "Set the password via environment variable: [bold]export NEWSMERGE_DB_PASSWORD=your_password[/bold]"
        )
        raise typer.Exit(1)

    console.print("✅ Database connection successful")

    console.print("\n[bold]Initializing database schema...[/bold]")
    try:
        init_database(db_config)
        with get_connection(db_config) as conn:
            SourceStorage(conn).sync_sources(sources)
        console.print("✅ Database schema initialized")
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        Panel(
            f"[green]✅ newsmerge initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Sources: {sources_path}\n\n"
            f"Next steps:\n"
            f"1. Set database password: [bold]export NEWSMERGE_DB_PASSWORD=your_password[/bold]\n"
            f"2. Set LLM API key: [bold]export OPENAI_API_KEY=your_key[/bold]\n"
            f"3. Run: [bold]newsmerge ingest --process[/bold]",
            style="green",
        )
    )
