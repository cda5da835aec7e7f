"""Status command for displaying application statistics."""

from rich.panel import Panel
from rich.table import Table
from sqlalchemy import func, select

from wortschatz.cli.utils.async_runner import run_async
from wortschatz.cli.utils.console import console
from wortschatz.config import settings
from wortschatz.database import async_session
from wortschatz.models import Alternative, Entry


def status() -> None:
    """Show dictionary and AI configuration status."""
    run_async(_status())


async def _status() -> None:
    """Async implementation of status command."""
    async with async_session() as session:
        entry_result = await session.execute(select(func.count(Entry.id)))
        entry_count: int = entry_result.scalar() or 0

        noun_result = await session.execute(
            select(func.count(Entry.id)).where(Entry.article.isnot(None))
        )
        noun_count: int = noun_result.scalar() or 0

        alt_result = await session.execute(select(func.count(Alternative.id)))
        alternative_count: int = alt_result.scalar() or 0

        item_result = await session.execute(select(func.count(func.distinct(Alternative.item))))
        item_count: int = item_result.scalar() or 0

    dict_table = Table(show_header=False, box=None, padding=(0, 2))
    dict_table.add_column("Label", style="bold")
    dict_table.add_column("Value", justify="right")
    dict_table.add_row("Entries", str(entry_count))
    dict_table.add_row("Nouns", str(noun_count))
    dict_table.add_row("Alternatives", str(alternative_count))
    dict_table.add_row("Items with alternatives", str(item_count))

    dict_panel = Panel(dict_table, title="[bold]Dictionary[/]", border_style="blue")

    ai_table = Table(show_header=False, box=None, padding=(0, 2))
    ai_table.add_column("Label", style="bold")
    ai_table.add_column("Value", justify="right")
    if settings.oracle_configured:
        ai_table.add_row("Status", "[green]Configured[/]")
        ai_table.add_row("Completion model", settings.completion_model)
        ai_table.add_row("Review model", settings.review_model)
        ai_table.add_row("Alternatives model", settings.alternatives_model)
    else:
        ai_table.add_row("Status", "[red]OPENAI_API_KEY not set[/]")
    ai_table.add_row(
        "Login", "[green]Enabled[/]" if settings.admin_password else "[yellow]Disabled[/]"
    )

    ai_panel = Panel(ai_table, title="[bold]AI[/]", border_style="blue")

    console.print()
    console.print(dict_panel)
    console.print(ai_panel)
    console.print()
