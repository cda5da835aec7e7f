"""Entry management commands."""

import typer
from rich.prompt import Confirm
from rich.table import Table

from wortschatz.cli.utils.async_runner import run_async
from wortschatz.cli.utils.console import console, fail
from wortschatz.database import async_session
from wortschatz.errors import WortschatzError
from wortschatz.services import storage
from wortschatz.services.completion import EntryFields

app = typer.Typer(
    name="entries",
    help="Entry management commands",
    no_args_is_help=True,
)


@app.command("list")
def list_entries(
    search: str = typer.Option("", "--search", "-s", help="Filter by term"),
) -> None:
    """List entries sorted by term."""
    run_async(_list_entries(search))


async def _list_entries(search: str) -> None:
    async with async_session() as session:
        entries = await storage.find_entries(session, search)

    if not entries:
        console.print("[dim]No entries found.[/]")
        return

    table = Table(title=f"Entries ({len(entries)})")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Term", style="term")
    table.add_column("POS", style="pos")
    table.add_column("Definition")

    for entry in entries:
        table.add_row(
            str(entry.id),
            entry.display_term,
            ", ".join(entry.part_of_speech_list),
            entry.definition,
        )

    console.print(table)


@app.command("add")
def add_entry(
    term: str = typer.Argument(..., help="Term (headword)"),
    definition: str = typer.Argument(..., help="Primary meaning"),
    example: str = typer.Option("", "--example", "-e", help="Usage example"),
    synonyms: str = typer.Option("", "--synonyms", help="Synonyms, comma separated"),
    pos: str = typer.Option("", "--pos", "-p", help="Part of speech (noun, verb, ...)"),
    article: str = typer.Option("", "--article", "-a", help="der/die/das (nouns only)"),
) -> None:
    """Add a new entry."""
    run_async(_add_entry(term, definition, example, synonyms, pos, article))


async def _add_entry(
    term: str,
    definition: str,
    example: str,
    synonyms: str,
    pos: str,
    article: str,
) -> None:
    fields = EntryFields(
        term=term,
        definition=definition,
        example=example,
        synonyms=synonyms,
        part_of_speech=[pos] if pos else [],
        article=article or None,
    )

    async with async_session() as session:
        try:
            entry = await storage.create_entry(session, fields)
        except WortschatzError as e:
            fail(e.message)

    console.print(f"[success]Added[/] [term]{entry.display_term}[/] (id {entry.id})")


@app.command("delete")
def delete_entry(
    entry_id: int = typer.Argument(..., help="Entry ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete an entry."""
    if not yes and not Confirm.ask(f"Delete entry {entry_id}?"):
        raise typer.Exit(0)
    run_async(_delete_entry(entry_id))


async def _delete_entry(entry_id: int) -> None:
    async with async_session() as session:
        try:
            await storage.delete_entry(session, entry_id)
        except WortschatzError as e:
            fail(e.message)

    console.print(f"[success]Deleted entry {entry_id}[/]")
