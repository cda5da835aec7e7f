"""Situational alternatives commands."""

import typer
from rich.panel import Panel
from rich.table import Table

from wortschatz.cli.utils.async_runner import run_async
from wortschatz.cli.utils.console import console, fail
from wortschatz.database import async_session
from wortschatz.errors import WortschatzError
from wortschatz.services.alternatives import AlternativesEngine, AlternativesView

app = typer.Typer(
    name="alternatives",
    help="Situational alternative phrasings",
    no_args_is_help=True,
)

SITUATION_LABELS = {
    "arbeit": "Karrieregefährdend",
    "schwiegereltern": "Schwiegereltern-kritisch",
    "philosophie_3uhr": "3-Uhr-tauglich",
    "gasse_betrunken": "Gasse, betrunken",
    "behoerdlich": "Behördlich leer",
}


def print_view(view: AlternativesView) -> None:
    """Render all situations of an item, friendliest phrasing first."""
    if view.total == 0:
        console.print(f"[dim]No alternatives stored for '{view.item}'.[/]")
        return

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Situation", style="situation")
    table.add_column("Alternatives")
    for key, texts in view.results.items():
        table.add_row(SITUATION_LABELS.get(key, key), "\n".join(texts) or "[dim]-[/]")

    console.print(Panel(table, title=f"[bold]{view.item}[/]", border_style="blue"))


@app.command("generate")
def generate(item: str = typer.Argument(..., help="Term or phrase")) -> None:
    """Generate new alternatives and show everything stored for the item."""
    run_async(_generate(item))


async def _generate(item: str) -> None:
    async with async_session() as session:
        try:
            view = await AlternativesEngine(session).generate(item)
        except WortschatzError as e:
            fail(e.message)
    print_view(view)


@app.command("show")
def show(item: str = typer.Argument(..., help="Term or phrase")) -> None:
    """Show stored alternatives for an item."""
    run_async(_show(item))


async def _show(item: str) -> None:
    async with async_session() as session:
        view = await AlternativesEngine(session).aggregate(item)
    print_view(view)


@app.command("clear")
def clear(item: str = typer.Argument(..., help="Term or phrase")) -> None:
    """Delete all stored alternatives for an item."""
    run_async(_clear(item))


async def _clear(item: str) -> None:
    async with async_session() as session:
        view = await AlternativesEngine(session).delete_all(item)
    console.print(f"[success]Cleared alternatives for '{view.item}'[/]")


@app.command("summary")
def summary() -> None:
    """Show how many alternatives are stored per item."""
    run_async(_summary())


async def _summary() -> None:
    async with async_session() as session:
        counts = await AlternativesEngine(session).summary()

    if not counts:
        console.print("[dim]No alternatives stored.[/]")
        return

    table = Table(title="Stored alternatives")
    table.add_column("Item", style="term")
    table.add_column("Count", justify="right")
    for item, count in sorted(counts.items()):
        table.add_row(item, str(count))
    console.print(table)
