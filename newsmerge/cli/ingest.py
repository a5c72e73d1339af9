"""Ingest command implementation."""

import typer
from rich.console import Console
from rich.table import Table

from ..db import get_connection
from ..db.sources import SourceStorage
from ..errors import NewsmergeError
from ..ingestion import ArticleFetcher, RawArticleIngestor, RSSFetcher
from ..llm import create_llm_provider
from .run import _load_checked_config, build_processor

console = Console()
log = Console(stderr=True)


def ingest_command(
    fetch_pages: bool = typer.Option(
        True,
        "--fetch-pages/--no-fetch-pages",
        help="Complete short feed summaries with the article page text",
    ),
    process: bool = typer.Option(
        False,
        "--process/--no-process",
        help="Process newly stored articles right away",
    ),
) -> None:
    """Fetch configured feeds and store new raw articles."""
    config = _load_checked_config()
    sources = [s for s in config.sources if s.enabled]
    if not sources:
        log.print("[yellow]No enabled sources. Run 'newsmerge init' or 'newsmerge sources add'.[/yellow]")
        raise typer.Exit(1)

    try:
        with get_connection(config.get_db_config()) as conn:
            source_map = SourceStorage(conn).sync_sources(config.sources)
            processor = build_processor(conn, config, create_llm_provider(config.get_llm_config()))
            ingestor = RawArticleIngestor(
                processor.store.raw_articles,
                RSSFetcher(),
                ArticleFetcher() if fetch_pages else None,
                hash_prefix_chars=config.config.dedup.hash_prefix_chars,
            )
            reports = ingestor.ingest_all(sources, source_map)

            results = []
            if process:
                for report in reports:
                    results.extend(processor.process(article_id) for article_id in report.inserted_ids)
    except NewsmergeError as e:
        log.print(f"[red]Ingestion failed: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Ingestion Summary")
    table.add_column("Source", style="cyan")
    table.add_column("Fetched", style="green")
    table.add_column("New", style="bold")
    table.add_column("Already stored", style="dim")
    table.add_column("Error", style="red")
    for report in reports:
        table.add_row(
            report.source_name,
            str(report.fetched),
            str(report.inserted),
            str(report.already_stored),
            report.error or "",
        )
    console.print(table)

    if process:
        failed = sum(1 for r in results if not r.success)
        console.print(f"Processed {len(results)} articles, {failed} failed")

    if reports and not any(r.success for r in reports):
        raise typer.Exit(1)
