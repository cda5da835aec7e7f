"""Spelling and lemma review of user-entered entry fields."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from wortschatz.config import settings
from wortschatz.errors import ValidationError
from wortschatz.services.llm import structured_completion
from wortschatz.services.morphology import (
    PARTS_OF_SPEECH,
    capitalize_first,
    normalize_article,
    normalize_part_of_speech,
    string_tags,
)

logger = logging.getLogger(__name__)

REVIEWABLE_FIELDS = ("term", "definition", "example", "synonyms")

CAPITALIZATION_REASON = "capitalization (noun)"

REVIEW_SYSTEM_PROMPT = " ".join(
    [
        "Du bist ein deutscher Lektor.",
        "Prüfe die gelieferten Felder auf Rechtschreibung und Typografie.",
        "Für das Feld term bestimme zusätzlich das Lemma, die Wortart und bei Nomen den Artikel.",
        "Antworte ausschließlich mit JSON, ohne Fließtext.",
        "Für nicht gelieferte Felder keinen Schlüssel ausgeben.",
        "Für Felder ohne Änderung: corrected = null, suggestions = [].",
        "Die Sprache ist immer Deutsch; nichts hinzuerfinden, den Sinn nicht verändern.",
    ]
)

REVIEW_SCHEMA_HINT = (
    "Schema: { term: { corrected, suggestions, lemma, partOfSpeech, article }, "
    "definition: { corrected, suggestions }, example: { corrected, suggestions }, "
    "synonyms: { corrected, suggestions } }. "
    "suggestions ist ein Array von Objekten { from, to, reason }. "
    f"partOfSpeech ist ein Array mit null bis n Einträgen aus: {', '.join(PARTS_OF_SPEECH)}. "
    "article: Enthält partOfSpeech ein Nomen, MUSS der passende Artikel (der/die/das) "
    "gesetzt werden, sonst null."
)


class SuggestionResponse(BaseModel):
    """One correction proposed by the oracle."""

    model_config = ConfigDict(populate_by_name=True)

    source: str | None = Field(None, alias="from")
    target: str | None = Field(None, alias="to")
    reason: str | None = None

    @field_validator("source", "target", "reason", mode="before")
    @classmethod
    def _strings_only(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None


class FieldReviewResponse(BaseModel):
    """Oracle review of a single field."""

    corrected: str | None = None
    suggestions: list[SuggestionResponse] = Field(default_factory=list)
    lemma: str | None = None
    part_of_speech: list[str] | str | None = Field(
        None, validation_alias=AliasChoices("partOfSpeech", "pos")
    )
    article: str | None = None

    @field_validator("suggestions", mode="before")
    @classmethod
    def _drop_malformed_suggestions(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]

    @field_validator("corrected", "lemma", "article", mode="before")
    @classmethod
    def _strings_only(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("part_of_speech", mode="before")
    @classmethod
    def _tags_only(cls, value: Any) -> str | list[str] | None:
        return string_tags(value)


class ReviewResponse(BaseModel):
    """Oracle reply for a review request, keyed by field."""

    term: FieldReviewResponse | None = None
    definition: FieldReviewResponse | None = None
    example: FieldReviewResponse | None = None
    synonyms: FieldReviewResponse | None = None

    @model_validator(mode="before")
    @classmethod
    def _ignore_non_object_fields(cls, data: Any) -> Any:
        # A field answered with something other than an object counts as "no review"
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if isinstance(value, dict)}
        return data


@dataclass
class Suggestion:
    """A single from/to correction with its reason."""

    source: str
    target: str
    reason: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"from": self.source, "to": self.target, "reason": self.reason}


@dataclass
class ReviewResult:
    """Review outcome for one field. Morphology is only filled for the term."""

    corrected: str | None = None
    suggestions: list[Suggestion] = field(default_factory=list)
    lemma: str | None = None
    part_of_speech: list[str] = field(default_factory=list)
    article: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "corrected": self.corrected,
            "suggestions": [s.to_dict() for s in self.suggestions],
            "lemma": self.lemma,
            "partOfSpeech": self.part_of_speech,
            "article": self.article,
        }


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def select_fields(
    fields: Mapping[str, str | None],
    user_fields: Iterable[str] | None = None,
    user_input: Mapping[str, bool] | None = None,
) -> dict[str, str]:
    """
    Pick the fields that should be sent for review.

    Only non-empty reviewable fields qualify. ``user_fields`` narrows the
    candidates; ``user_input`` (field -> typed by the user) excludes fields
    that were filled by an earlier AI completion.
    """
    candidates = (
        [f for f in user_fields if f in REVIEWABLE_FIELDS]
        if user_fields is not None
        else list(REVIEWABLE_FIELDS)
    )
    selected: dict[str, str] = {}
    for name in candidates:
        value = fields.get(name)
        if not value or not value.strip():
            continue
        if user_input is not None and not user_input.get(name):
            continue
        selected[name] = value
    return selected


class Reviewer:
    """Ask the oracle for spelling corrections and, for the term, its morphology."""

    def __init__(self, model: str | None = None) -> None:
        self.model = model or settings.review_model

    async def review(
        self,
        fields: Mapping[str, str | None],
        user_fields: Iterable[str] | None = None,
        user_input: Mapping[str, bool] | None = None,
    ) -> dict[str, ReviewResult]:
        """
        Review user-entered fields.

        Raises:
            ValidationError: No field qualifies for review (no oracle call is made)
            ConfigurationError: Oracle not configured
            UpstreamError: Oracle failed or answered with unusable output
        """
        to_review = select_fields(fields, user_fields, user_input)
        if not to_review:
            raise ValidationError("Provide at least one user-entered field to review")

        reply = await structured_completion(
            system_prompt=REVIEW_SYSTEM_PROMPT,
            payload=to_review,
            response_model=ReviewResponse,
            temperature=0,
            model=self.model,
            schema_hint=REVIEW_SCHEMA_HINT,
            feature="Spellcheck",
        )

        results: dict[str, ReviewResult] = {}
        for name, original in to_review.items():
            raw = getattr(reply.data, name)
            if raw is None:
                results[name] = ReviewResult()
            elif name == "term":
                results[name] = self._build_term_result(raw, original)
            else:
                results[name] = ReviewResult(
                    corrected=_clean(raw.corrected),
                    suggestions=self._build_suggestions(raw),
                )
        return results

    def _build_suggestions(self, raw: FieldReviewResponse) -> list[Suggestion]:
        return [
            Suggestion(source=s.source or "", target=s.target or "", reason=s.reason or "")
            for s in raw.suggestions
            if s.target
        ]

    def _build_term_result(self, raw: FieldReviewResponse, original: str) -> ReviewResult:
        result = ReviewResult(
            corrected=_clean(raw.corrected),
            suggestions=self._build_suggestions(raw),
            lemma=_clean(raw.lemma),
            part_of_speech=normalize_part_of_speech(raw.part_of_speech),
            article=normalize_article(raw.article),
        )

        if "noun" in result.part_of_speech:
            base = result.corrected or original
            capitalized = capitalize_first(base)
            if capitalized and capitalized != base:
                result.corrected = capitalized
                result.suggestions.append(
                    Suggestion(
                        source=original or base,
                        target=capitalized,
                        reason=CAPITALIZATION_REASON,
                    )
                )
                logger.info(f"Capitalized noun '{original}' -> '{capitalized}'")
            result.lemma = capitalize_first(result.lemma)

        return result
