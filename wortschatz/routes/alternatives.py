"""Situational alternatives routes (no login required)."""

import logging
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from wortschatz.database import get_session
from wortschatz.services import storage
from wortschatz.services.alternatives import AlternativesEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/entries", tags=["alternatives"])


class AlternativesRequest(BaseModel):
    item: str | None = None


@router.post("/ai-alternatives")
async def generate_alternatives(
    payload: AlternativesRequest,
    session: AsyncSession = Depends(get_session),
) -> dict[str, Any]:
    """Generate new alternatives and return everything stored for the item."""
    view = await AlternativesEngine(session).generate(payload.item or "")
    return view.to_dict()


@router.get("/ai-alternatives/summary")
async def alternatives_summary(
    session: AsyncSession = Depends(get_session),
) -> dict[str, dict[str, int]]:
    """Stored alternative counts per item, for UI badges."""
    return {"summary": await AlternativesEngine(session).summary()}


@router.get("/{entry_id}/ai-alternatives")
async def get_alternatives(
    entry_id: int,
    session: AsyncSession = Depends(get_session),
) -> dict[str, Any]:
    """All stored alternatives for an entry's term."""
    entry = await storage.get_entry(session, entry_id)
    view = await AlternativesEngine(session).aggregate(entry.term)
    return view.to_dict()


@router.delete("/{entry_id}/ai-alternatives")
async def delete_alternatives(
    entry_id: int,
    session: AsyncSession = Depends(get_session),
) -> dict[str, Any]:
    """Drop all stored alternatives for an entry's term."""
    entry = await storage.get_entry(session, entry_id)
    view = await AlternativesEngine(session).delete_all(entry.term)
    return view.to_dict()
