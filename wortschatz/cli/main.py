"""Main CLI application entry point."""

import typer

from wortschatz.cli.commands import alternatives, entries, review, status
from wortschatz.cli.utils.async_runner import run_async
from wortschatz.cli.utils.console import fail
from wortschatz.config import settings
from wortschatz.database import init_db
from wortschatz.logging_config import setup_logging

app = typer.Typer(
    name="wortschatz",
    help="Personal German vocabulary manager with AI review and completion",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def startup() -> None:
    """Initialize application on startup."""
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(console=False)

    try:
        run_async(init_db())
    except Exception as e:
        fail(f"Failed to initialize database: {e}")


app.command(name="status", help="Show dictionary and AI status")(status.status)
app.command(name="review", help="Check spelling and morphology of a term")(review.review)
app.command(name="complete", help="Let the AI fill missing entry fields")(review.complete)

app.add_typer(entries.app, name="entries")
app.add_typer(alternatives.app, name="alternatives")


if __name__ == "__main__":
    app()
