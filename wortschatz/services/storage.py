"""Persistence of entries and alternative records."""

import logging
from collections.abc import Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from wortschatz.errors import DuplicateTermError, NotFoundError, ValidationError
from wortschatz.models import Alternative, Entry
from wortschatz.services.completion import EntryFields
from wortschatz.services.morphology import validate_morphology

logger = logging.getLogger(__name__)


async def find_entries(session: AsyncSession, search: str = "") -> list[Entry]:
    """List entries sorted by term, optionally filtered by a term substring."""
    stmt = select(Entry).order_by(Entry.term)
    if search:
        # % and _ in the search text match literally
        pattern = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        stmt = stmt.where(Entry.term.ilike(f"%{pattern}%", escape="\\"))
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_entry(session: AsyncSession, entry_id: int) -> Entry:
    entry = await session.get(Entry, entry_id)
    if entry is None:
        raise NotFoundError("entry not found")
    return entry


async def check_duplicate_term(
    session: AsyncSession, term: str, exclude_id: int | None = None
) -> bool:
    """Check if another entry already uses this term."""
    stmt = select(Entry.id).where(Entry.term == term)
    if exclude_id is not None:
        stmt = stmt.where(Entry.id != exclude_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none() is not None


def _validated_values(fields: EntryFields) -> dict[str, object]:
    """Trim and validate entry input, returning column values."""
    term = fields.term.strip()
    definition = fields.definition.strip()
    if not term or not definition:
        raise ValidationError("term and definition are required")

    morph = validate_morphology(fields.part_of_speech, fields.article)
    if morph.error:
        raise ValidationError(morph.error)

    return {
        "term": term,
        "definition": definition,
        "example": fields.example.strip() or None,
        "synonyms": fields.synonyms.strip() or None,
        "part_of_speech_list": morph.part_of_speech,
        "article": morph.article,
    }


async def _commit_entry(session: AsyncSession, entry: Entry) -> Entry:
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise DuplicateTermError("term already exists") from e
    await session.refresh(entry)
    return entry


async def create_entry(session: AsyncSession, fields: EntryFields) -> Entry:
    """
    Create a new entry.

    Raises:
        ValidationError: Missing term/definition or a noun without article
        DuplicateTermError: Term already exists
    """
    values = _validated_values(fields)
    if await check_duplicate_term(session, str(values["term"])):
        raise DuplicateTermError("term already exists")

    entry = Entry()
    for name, value in values.items():
        setattr(entry, name, value)
    session.add(entry)
    entry = await _commit_entry(session, entry)
    logger.info(f"Created entry {entry.id} ({entry.term})")
    return entry


async def update_entry(session: AsyncSession, entry_id: int, fields: EntryFields) -> Entry:
    """
    Replace all fields of an existing entry.

    Raises:
        ValidationError: Missing term/definition or a noun without article
        NotFoundError: No entry with this id
        DuplicateTermError: Another entry already uses the term
    """
    values = _validated_values(fields)
    entry = await get_entry(session, entry_id)
    if await check_duplicate_term(session, str(values["term"]), exclude_id=entry_id):
        raise DuplicateTermError("term already exists")

    for name, value in values.items():
        setattr(entry, name, value)
    entry = await _commit_entry(session, entry)
    logger.info(f"Updated entry {entry.id} ({entry.term})")
    return entry


async def delete_entry(session: AsyncSession, entry_id: int) -> None:
    entry = await get_entry(session, entry_id)
    await session.delete(entry)
    await session.commit()
    logger.info(f"Deleted entry {entry_id}")


async def find_alternatives(session: AsyncSession, item: str) -> list[Alternative]:
    """All stored alternatives for an item, oldest first."""
    stmt = (
        select(Alternative)
        .where(Alternative.item == item)
        .order_by(Alternative.timestamp, Alternative.id)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def insert_alternatives(session: AsyncSession, records: Sequence[Alternative]) -> None:
    if not records:
        return
    session.add_all(records)
    await session.commit()


async def delete_alternatives(session: AsyncSession, item: str) -> int:
    """Delete every alternative stored for an item, returning the row count."""
    result = await session.execute(delete(Alternative).where(Alternative.item == item))
    await session.commit()
    return int(getattr(result, "rowcount", 0) or 0)


async def alternatives_count_by_item(session: AsyncSession) -> dict[str, int]:
    stmt = select(Alternative.item, func.count(Alternative.id)).group_by(Alternative.item)
    result = await session.execute(stmt)
    return {item: count for item, count in result.all()}
