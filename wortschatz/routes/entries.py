"""Entry management, spelling review and AI completion routes."""

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from wortschatz.database import get_session
from wortschatz.models import Entry
from wortschatz.routes.deps import require_ai_session, require_session
from wortschatz.services import storage
from wortschatz.services.completion import EntryFields, FieldCompleter
from wortschatz.services.reviewer import Reviewer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/entries", tags=["entries"])


class EntryPayload(BaseModel):
    """Entry fields as sent by the UI."""

    model_config = ConfigDict(populate_by_name=True)

    term: str | None = None
    definition: str | None = None
    example: str | None = None
    synonyms: str | None = None
    part_of_speech: list[str] | str | None = Field(None, alias="partOfSpeech")
    article: str | None = None

    def to_fields(self) -> EntryFields:
        pos = self.part_of_speech
        return EntryFields(
            term=self.term or "",
            definition=self.definition or "",
            example=self.example or "",
            synonyms=self.synonyms or "",
            part_of_speech=[pos] if isinstance(pos, str) else list(pos or []),
            article=self.article or None,
        )


class CompleteRequest(EntryPayload):
    focused_field: str | None = Field(None, alias="focusedField")


class ReviewRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    term: str | None = None
    definition: str | None = None
    example: str | None = None
    synonyms: str | None = None
    user_fields: list[str] | None = Field(None, alias="userFields")
    user_input: dict[str, bool] | None = Field(None, alias="userInput")


class EntryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    term: str
    definition: str
    example: str | None = None
    synonyms: str | None = None
    part_of_speech: list[str] = Field(default_factory=list, alias="partOfSpeech")
    article: str | None = None
    created_at: datetime | None = Field(None, alias="createdAt")
    updated_at: datetime | None = Field(None, alias="updatedAt")

    @classmethod
    def from_entry(cls, entry: Entry) -> "EntryResponse":
        return cls(
            id=entry.id,
            term=entry.term,
            definition=entry.definition,
            example=entry.example,
            synonyms=entry.synonyms,
            part_of_speech=entry.part_of_speech_list,
            article=entry.article,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )


@router.get("", response_model=list[EntryResponse])
async def list_entries(
    search: str = Query("", description="Filter by term"),
    session: AsyncSession = Depends(get_session),
) -> list[EntryResponse]:
    """List all entries sorted by term."""
    entries = await storage.find_entries(session, search)
    return [EntryResponse.from_entry(e) for e in entries]


@router.post(
    "",
    response_model=EntryResponse,
    status_code=201,
    dependencies=[Depends(require_session)],
)
async def create_entry(
    payload: EntryPayload,
    session: AsyncSession = Depends(get_session),
) -> EntryResponse:
    """Create an entry; nouns must come with an article."""
    entry = await storage.create_entry(session, payload.to_fields())
    return EntryResponse.from_entry(entry)


@router.post("/spellcheck", dependencies=[Depends(require_ai_session)])
async def review_fields(payload: ReviewRequest) -> dict[str, Any]:
    """Review user-entered fields for spelling, lemma and morphology."""
    fields = {
        "term": payload.term,
        "definition": payload.definition,
        "example": payload.example,
        "synonyms": payload.synonyms,
    }
    results = await Reviewer().review(fields, payload.user_fields, payload.user_input)
    return {name: result.to_dict() for name, result in results.items()}


@router.post("/ai-complete", dependencies=[Depends(require_ai_session)], response_model=None)
async def complete_fields(payload: CompleteRequest) -> dict[str, Any] | JSONResponse:
    """Let the oracle fill the fields the user has not written."""
    result = await FieldCompleter().complete(payload.to_fields(), payload.focused_field)
    if result.error:
        return JSONResponse(
            status_code=502,
            content={"error": result.error, "fields": result.fields.to_dict()},
        )
    return result.fields.to_dict()


@router.put(
    "/{entry_id}",
    response_model=EntryResponse,
    dependencies=[Depends(require_session)],
)
async def update_entry(
    entry_id: int,
    payload: EntryPayload,
    session: AsyncSession = Depends(get_session),
) -> EntryResponse:
    """Replace all fields of an entry."""
    entry = await storage.update_entry(session, entry_id, payload.to_fields())
    return EntryResponse.from_entry(entry)


@router.delete("/{entry_id}", dependencies=[Depends(require_session)])
async def delete_entry(
    entry_id: int,
    session: AsyncSession = Depends(get_session),
) -> dict[str, bool]:
    """Delete an entry. Its alternatives are kept, they are keyed by term."""
    await storage.delete_entry(session, entry_id)
    return {"ok": True}
