"""Bridge from synchronous Typer commands to the async services."""

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

from wortschatz.cli.utils.console import fail

T = TypeVar("T")


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run a command coroutine to completion; Ctrl-C exits with status 130."""
    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        fail("Aborted", code=130)
