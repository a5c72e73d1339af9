"""Process and sweep command implementations."""

from typing import Optional

import typer
from psycopg import Connection
from rich.console import Console

from ..config import Config
from ..db import ContentStore, get_connection, validate_connection
from ..llm import LLMProvider, create_llm_provider
from ..pipeline import ArticleProcessor, UnprocessedSweep

console = Console()
log = Console(stderr=True)


def build_processor(conn: Connection, config: Config, llm_provider: LLMProvider) -> ArticleProcessor:
    """Wire a processor to one pooled connection."""
    return ArticleProcessor(
        ContentStore(conn),
        llm_provider,
        config.reliability,
        config.breaking_keywords,
        config.config,
    )


def _load_checked_config() -> Config:
    config = Config()
    log.print("[dim]Checking database connection...[/dim]")
    if not validate_connection(config.get_db_config()):
        log.print("[red]❌ Database connection failed![/red]")
        raise typer.Exit(1)
    return config


def process_command(
    raw_article_id: int = typer.Argument(..., help="Raw article ID to process"),
) -> None:
    """Process one raw article and print the result."""
    try:
        config = _load_checked_config()
        llm_provider = create_llm_provider(config.get_llm_config())

        with get_connection(config.get_db_config()) as conn:
            result = build_processor(conn, config, llm_provider).process(raw_article_id)
    except (FileNotFoundError, ValueError) as e:
        log.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print_json(result.model_dump_json())
    if not result.success:
        raise typer.Exit(1)


def sweep_command(
    batch_size: Optional[int] = typer.Option(None, "--batch-size", "-b", help="Articles per sweep"),
    pace: Optional[float] = typer.Option(None, "--pace", help="Seconds between articles"),
) -> None:
    """Retry processing for unprocessed raw articles, oldest first."""
    try:
        config = _load_checked_config()
        llm_provider = create_llm_provider(config.get_llm_config())

        if batch_size is None:
            batch_size = config.config.sweep.batch_size
        if pace is None:
            pace = config.config.sweep.pace_seconds

        with get_connection(config.get_db_config()) as conn:
            processor = build_processor(conn, config, llm_provider)
            sweep = UnprocessedSweep(processor.store.raw_articles, processor)
            report = sweep.run(batch_size=batch_size, pace_seconds=pace)
    except KeyboardInterrupt:
        log.print("\n[yellow]Sweep interrupted by user[/yellow]")
        raise typer.Exit(1)
    except (FileNotFoundError, ValueError) as e:
        log.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print_json(report.model_dump_json(exclude={"results"}))
    log.print(f"[dim]LLM usage: {llm_provider.get_usage_stats()}[/dim]")
    if report.failed:
        raise typer.Exit(1)
