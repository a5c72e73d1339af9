"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .breaking import breaking_command
from .ingest import ingest_command
from .init import init_command
from .run import process_command, sweep_command
from .sources import sources_app

app = typer.Typer(
    name="newsmerge",
    help="newsmerge - news deduplication, clustering and synthesis pipeline",
    no_args_is_help=True,
)

# Register commands
app.command("init")(init_command)
app.command("process")(process_command)
app.command("sweep")(sweep_command)
app.command("ingest")(ingest_command)
app.command("breaking")(breaking_command)
app.add_typer(sources_app, name="sources", help="Manage news sources")


if __name__ == "__main__":
    app()
