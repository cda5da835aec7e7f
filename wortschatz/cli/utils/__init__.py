"""CLI helpers: async bridge and Rich output."""

from wortschatz.cli.utils.async_runner import run_async
from wortschatz.cli.utils.console import console, error_console, fail

__all__ = ["console", "error_console", "fail", "run_async"]
