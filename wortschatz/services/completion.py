"""AI-assisted completion of entry fields."""

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from wortschatz.config import settings
from wortschatz.errors import UpstreamError, ValidationError
from wortschatz.services.llm import structured_completion
from wortschatz.services.morphology import (
    normalize_article,
    normalize_part_of_speech,
    string_tags,
)

logger = logging.getLogger(__name__)

CONTENT_FIELDS = ("term", "definition", "example", "synonyms")

COMPLETION_SYSTEM_PROMPT = " ".join(
    [
        "Du bist ein hilfsbereiter, sachlicher Lexikon-Redakteur.",
        "Ergänze die fehlenden Felder eines trockenen, präzisen Wörterbucheintrags.",
        "Korrigiere bei allen gelieferten Feldern Rechtschreibung und Typografie,"
        " ohne den Sinn zu verändern.",
        "Schreibe den Term (das Lemma) klein, außer bei Eigennamen und Abkürzungen;"
        " setze am Satzanfang nicht automatisch Großbuchstaben.",
        "Struktur: term, definition (Bedeutung), example (Gebrauch),"
        " synonyms (Synonyme/Alternativen).",
        "Gib ausschließlich JSON zurück mit den Schlüsseln: term, definition, example, synonyms.",
    ]
)


class CompletionResponse(BaseModel):
    """Oracle reply for a completion request."""

    term: str | None = None
    definition: str | None = None
    example: str | None = None
    synonyms: str | None = None
    part_of_speech: list[str] | str | None = Field(
        None, validation_alias=AliasChoices("partOfSpeech", "pos")
    )
    article: str | None = None

    @field_validator("term", "definition", "example", "synonyms", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        # Synonyms in particular tend to come back as a list
        if isinstance(value, list):
            return ", ".join(str(v).strip() for v in value if str(v).strip())
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("article", mode="before")
    @classmethod
    def _article_string(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("part_of_speech", mode="before")
    @classmethod
    def _tags_only(cls, value: Any) -> str | list[str] | None:
        return string_tags(value)


@dataclass
class EntryFields:
    """Editable entry content: four text fields plus morphology."""

    term: str = ""
    definition: str = ""
    example: str = ""
    synonyms: str = ""
    part_of_speech: list[str] = field(default_factory=list)
    article: str | None = None

    def content(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in CONTENT_FIELDS}

    def has_content(self) -> bool:
        return any(value.strip() for value in self.content().values())

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.content(),
            "partOfSpeech": list(self.part_of_speech),
            "article": self.article,
        }


@dataclass
class CompletionResult:
    """Completed fields, or the untouched input plus an error message."""

    fields: EntryFields
    error: str | None = None
    model: str | None = None


def merge_text(original: str, proposed: str | None) -> str:
    """Use the proposed value unless it is missing or blank."""
    if proposed is None or not proposed.strip():
        return original
    return proposed.strip()


def merge_morphology(
    current_pos: list[str],
    current_article: str | None,
    proposed_pos: Any,
    proposed_article: Any,
) -> tuple[list[str], str | None]:
    """
    Fill unset morphology from the oracle's guess.

    Already resolved values (confirmed by a review or by the user) always win.
    A resolved non-noun never carries an article.
    """
    pos = normalize_part_of_speech(current_pos) or normalize_part_of_speech(proposed_pos)
    article = normalize_article(current_article) or normalize_article(proposed_article)
    if pos and "noun" not in pos:
        article = None
    return pos, article


class FieldCompleter:
    """Let the oracle propose values for the fields the user has not written."""

    def __init__(self, model: str | None = None) -> None:
        self.model = model or settings.completion_model

    def build_payload(self, fields: EntryFields, focused_field: str | None) -> dict[str, Any]:
        """
        Build the user payload sent to the oracle.

        With a focused field only that field is sent, so text in the other
        fields can never be echoed back as a "correction" of itself.
        """
        if focused_field:
            payload: dict[str, Any] = {focused_field: getattr(fields, focused_field).strip()}
        else:
            payload = {
                name: value.strip() for name, value in fields.content().items() if value.strip()
            }

        pos = normalize_part_of_speech(fields.part_of_speech)
        if pos:
            payload["partOfSpeech"] = pos
        article = normalize_article(fields.article)
        if article:
            payload["article"] = article
        return payload

    async def complete(
        self, fields: EntryFields, focused_field: str | None = None
    ) -> CompletionResult:
        """
        Fill the remaining entry fields via the oracle.

        Raises:
            ValidationError: No content at all, or an unknown/empty focused field
            ConfigurationError: Oracle not configured

        Oracle failures do not raise: the original fields come back unchanged
        with ``error`` set.
        """
        if not fields.has_content():
            raise ValidationError("Provide at least term, definition, example, or synonyms")
        if focused_field is not None:
            if focused_field not in CONTENT_FIELDS:
                raise ValidationError(f"Unknown focused field: {focused_field}")
            if not getattr(fields, focused_field).strip():
                raise ValidationError(f"Focused field '{focused_field}' is empty")

        payload = self.build_payload(fields, focused_field)

        try:
            reply = await structured_completion(
                system_prompt=COMPLETION_SYSTEM_PROMPT,
                payload=payload,
                response_model=CompletionResponse,
                temperature=0.4,
                model=self.model,
            )
        except UpstreamError as e:
            logger.error(f"AI completion failed for {payload}: {e.message}")
            return CompletionResult(fields=replace(fields), error=e.message)

        data = reply.data
        pos, article = merge_morphology(
            fields.part_of_speech, fields.article, data.part_of_speech, data.article
        )
        completed = EntryFields(
            term=merge_text(fields.term, data.term),
            definition=merge_text(fields.definition, data.definition),
            example=merge_text(fields.example, data.example),
            synonyms=merge_text(fields.synonyms, data.synonyms),
            part_of_speech=pos,
            article=article,
        )
        return CompletionResult(fields=completed, model=reply.model)
