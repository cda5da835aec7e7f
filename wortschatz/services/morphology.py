"""Part-of-speech and article normalization for German entries."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

PARTS_OF_SPEECH = (
    "noun",
    "verb",
    "adjective",
    "adverb",
    "interjection",
    "particle",
    "conjunction",
    "preposition",
    "phrase",
)

ARTICLES = ("der", "die", "das")

ARTICLE_REQUIRED = "article required"


@dataclass
class MorphologyResult:
    """Outcome of validate_morphology: normalized values or an error."""

    part_of_speech: list[str] = field(default_factory=list)
    article: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def normalize_part_of_speech(value: str | Iterable[str] | None) -> list[str]:
    """
    Canonicalize part-of-speech input to a list of at most one tag.

    Accepts a single value or a list, case-insensitively. Unknown tags are
    dropped and duplicates collapsed. Only the first tag is kept: entries carry
    a single primary part of speech even when the oracle proposes several.
    """
    if not value:
        return []
    values = [value] if isinstance(value, str) else list(value)

    normalized: list[str] = []
    for item in values:
        tag = str(item).strip().lower()
        if tag in PARTS_OF_SPEECH and tag not in normalized:
            normalized.append(tag)
    return normalized[:1]


def string_tags(value: Any) -> str | list[str] | None:
    """Keep a bare string or the string items of a list; anything else is None."""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str)]
    return None


def normalize_article(value: str | None) -> str | None:
    """Return der/die/das, or None for empty or invalid input."""
    if not value:
        return None
    normalized = str(value).strip().lower()
    return normalized if normalized in ARTICLES else None


def validate_morphology(
    part_of_speech: str | Iterable[str] | None, article: str | None
) -> MorphologyResult:
    """
    Apply the noun/article rule.

    A noun must have an article; anything else never keeps one. Returns an
    error result instead of raising so the persistence boundary decides how
    to surface it.
    """
    pos = normalize_part_of_speech(part_of_speech)
    normalized_article = normalize_article(article)

    if "noun" in pos:
        if not normalized_article:
            return MorphologyResult(part_of_speech=pos, error=ARTICLE_REQUIRED)
        return MorphologyResult(part_of_speech=pos, article=normalized_article)

    return MorphologyResult(part_of_speech=pos, article=None)


def capitalize_first(text: str | None) -> str | None:
    """Uppercase the first character (German nouns are capitalized)."""
    if not text:
        return text
    return text[0].upper() + text[1:]
