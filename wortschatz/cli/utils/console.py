"""Rich consoles and error exit for CLI commands."""

from typing import NoReturn

import typer
from rich.console import Console
from rich.theme import Theme

theme = Theme(
    {
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red bold",
        "term": "magenta",
        "pos": "blue",
        "situation": "bold cyan",
        "dim": "dim",
    }
)

console = Console(theme=theme)

error_console = Console(theme=theme, stderr=True)


def fail(message: str, code: int = 1) -> NoReturn:
    """Print an error to stderr and end the command."""
    error_console.print(f"[error]{message}[/]")
    raise typer.Exit(code) from None
