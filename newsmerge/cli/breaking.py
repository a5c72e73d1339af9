"""Breaking-news signal command."""

import json
from typing import Optional

import typer
from rich.console import Console

from ..db import ContentStore, get_connection
from .run import _load_checked_config

console = Console()


def breaking_command(
    minutes: Optional[int] = typer.Option(
        None,
        "--minutes",
        "-m",
        help="Maximum article age in minutes (default from config)",
    ),
) -> None:
    """Print recent breaking articles for the notification dispatcher."""
    config = _load_checked_config()
    if minutes is None:
        minutes = config.config.breaking.signal_window_minutes

    with get_connection(config.get_db_config()) as conn:
        articles = ContentStore(conn).processed_articles.recent_breaking(max_age_minutes=minutes)

    console.print_json(
        json.dumps(
            [
                {
                    "id": a.id,
                    "title": a.title,
                    "level": a.breaking_news_level.value,
                    "categories": [c.value for c in a.categories],
                    "published_at": a.published_at.isoformat(),
                }
                for a in articles
            ]
        )
    )
