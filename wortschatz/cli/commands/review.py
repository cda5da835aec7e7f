"""AI review and completion commands."""

import typer
from rich.table import Table

from wortschatz.cli.utils.async_runner import run_async
from wortschatz.cli.utils.console import console, fail
from wortschatz.errors import WortschatzError
from wortschatz.services.completion import CONTENT_FIELDS, EntryFields, FieldCompleter
from wortschatz.services.reviewer import Reviewer


def review(
    term: str = typer.Argument(..., help="Term to check"),
    definition: str = typer.Option("", "--definition", "-d", help="Also review a definition"),
    example: str = typer.Option("", "--example", "-e", help="Also review an example"),
) -> None:
    """Check spelling, lemma and morphology of a term."""
    run_async(_review(term, definition, example))


async def _review(term: str, definition: str, example: str) -> None:
    fields = {"term": term, "definition": definition, "example": example}
    try:
        results = await Reviewer().review(fields)
    except WortschatzError as e:
        fail(e.message)

    for name, result in results.items():
        console.print(f"\n[bold]{name}[/]: {fields[name]}")
        if result.corrected:
            console.print(f"  Corrected: [success]{result.corrected}[/]")
        if name == "term":
            if result.lemma:
                console.print(f"  Lemma: [term]{result.lemma}[/]")
            if result.part_of_speech:
                pos = ", ".join(result.part_of_speech)
                console.print(f"  Part of speech: [pos]{pos}[/]")
            if result.article:
                console.print(f"  Article: {result.article}")

        if not result.suggestions:
            console.print("  [dim]No suggestions[/]")
            continue

        table = Table(show_header=True, box=None, padding=(0, 2))
        table.add_column("From", style="dim")
        table.add_column("To", style="success")
        table.add_column("Reason")
        for suggestion in result.suggestions:
            table.add_row(suggestion.source, suggestion.target, suggestion.reason)
        console.print(table)


def complete(
    term: str = typer.Option("", "--term", "-t", help="Term"),
    definition: str = typer.Option("", "--definition", "-d", help="Definition"),
    example: str = typer.Option("", "--example", "-e", help="Usage example"),
    synonyms: str = typer.Option("", "--synonyms", help="Synonyms"),
    pos: str = typer.Option("", "--pos", "-p", help="Known part of speech"),
    article: str = typer.Option("", "--article", "-a", help="Known article"),
    focus: str = typer.Option("", "--focus", "-f", help="Only send this field to the AI"),
) -> None:
    """Let the AI fill the missing entry fields."""
    fields = EntryFields(
        term=term,
        definition=definition,
        example=example,
        synonyms=synonyms,
        part_of_speech=[pos] if pos else [],
        article=article or None,
    )
    run_async(_complete(fields, focus or None))


async def _complete(fields: EntryFields, focus: str | None) -> None:
    try:
        result = await FieldCompleter().complete(fields, focus)
    except WortschatzError as e:
        fail(e.message)

    if result.error:
        fail(f"AI completion failed: {result.error}")

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for name in CONTENT_FIELDS:
        table.add_row(name, getattr(result.fields, name))
    table.add_row("partOfSpeech", ", ".join(result.fields.part_of_speech))
    table.add_row("article", result.fields.article or "")
    console.print(table)
