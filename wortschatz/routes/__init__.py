"""Route handlers for Wortschatz."""

from wortschatz.routes.alternatives import router as alternatives_router
from wortschatz.routes.entries import router as entries_router

__all__ = [
    "alternatives_router",
    "entries_router",
]
