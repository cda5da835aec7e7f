"""SQLAlchemy ORM models."""

import json
from datetime import datetime, timezone
from typing import Any, cast

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from wortschatz.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Entry(Base):
    """A vocabulary entry in the user's dictionary."""

    __tablename__ = "entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    term: Mapped[str] = mapped_column(Text, unique=True, index=True)
    definition: Mapped[str] = mapped_column(Text)
    example: Mapped[str | None] = mapped_column(Text, nullable=True)
    synonyms: Mapped[str | None] = mapped_column(Text, nullable=True)
    part_of_speech: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON array
    article: Mapped[str | None] = mapped_column(Text, nullable=True)  # der/die/das (nouns only)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    @property
    def part_of_speech_list(self) -> list[str]:
        """Get part-of-speech tags as a Python list."""
        if not self.part_of_speech:
            return []
        try:
            result: Any = json.loads(self.part_of_speech)
            return cast(list[str], result)
        except json.JSONDecodeError:
            return []

    @part_of_speech_list.setter
    def part_of_speech_list(self, value: list[str]) -> None:
        """Set part-of-speech tags from a Python list."""
        self.part_of_speech = json.dumps(value) if value else None

    @property
    def is_noun(self) -> bool:
        return "noun" in self.part_of_speech_list

    @property
    def display_term(self) -> str:
        """Get term with article for nouns."""
        if self.is_noun and self.article:
            return f"{self.article} {self.term}"
        return str(self.term)


class Alternative(Base):
    """One AI-generated situational phrasing for an item."""

    __tablename__ = "alternatives"

    id: Mapped[int] = mapped_column(primary_key=True)
    item: Mapped[str] = mapped_column(Text, index=True)
    situation: Mapped[str] = mapped_column(Text)
    alternative_text: Mapped[str] = mapped_column(Text)
    timestamp: Mapped[datetime] = mapped_column(default=utcnow)
    model_version: Mapped[str | None] = mapped_column(Text, nullable=True)
