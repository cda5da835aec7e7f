"""Situational alternative phrasings, generated by the oracle and cached per item."""

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from wortschatz.config import settings
from wortschatz.errors import UpstreamError, ValidationError
from wortschatz.models import Alternative, utcnow
from wortschatz.services import storage
from wortschatz.services.llm import structured_completion

logger = logging.getLogger(__name__)

SITUATIONS = (
    "arbeit",
    "schwiegereltern",
    "philosophie_3uhr",
    "gasse_betrunken",
    "behoerdlich",
)

MAX_PER_SITUATION = 3

ALTERNATIVES_SYSTEM_PROMPT = """
AUFGABE: Situative Alternativen, geordnet nach Tonalität

Du bist ein Sprach- und Kontext-Agent. Erzeuge zu einem Ausdruck situativ passende
alternative Formulierungen und ordne sie innerhalb jeder Situation nach Tonalität.

Sortierregel (verbindlich) innerhalb jeder Situation:
1) freundlich / positiv / wohlwollend
2) neutral / locker / ironisch
3) kritisch / flapsig / sozial unpassend
Die Liste geht von sozial akzeptabel zu zunehmend unfreundlich.
Bei nur einer Alternative wähle eine mittlere Tonalität.

Allgemeine Regeln:
- 1 bis 3 Alternativen pro Situation.
- Positive Varianten sind ausdrücklich erlaubt; Überheblichkeit ist nicht der Standard.
- Keine Erklärungen, keine Metakommentare, keine Emojis.
- Keine Wiederholungen zwischen Situationen.
- Neutrale oder abstrakte Begriffe verlangen mildere Tonlagen.

Situationen:
1. arbeit – karrieregefährdend: überfreundlich oder zu salopp bis latent respektlos,
   nie offen beleidigend.
2. schwiegereltern – gut gemeint, aber irritierend: höflich-locker bis sozial unangenehm.
3. philosophie_3uhr – Tee und Philosophie um 3 Uhr: ruhig-wertschätzend bis
   überhöht-abgehoben.
4. gasse_betrunken – emotionale Nähe: kumpelhaft bis zunehmend grob.
5. behoerdlich – emotionslose Distanz: sachlich bis maximal entpersonalisiert.
"""

ALTERNATIVES_SCHEMA_HINT = """Ausgabeformat (zwingend, ausschließlich JSON):
{
  "item": "<originaler Ausdruck>",
  "results": {
    "arbeit": [],
    "schwiegereltern": [],
    "philosophie_3uhr": [],
    "gasse_betrunken": [],
    "behoerdlich": []
  }
}"""


def empty_results() -> dict[str, list[str]]:
    return {key: [] for key in SITUATIONS}


def _to_text_list(value: Any) -> list[str]:
    """Coerce a situation value to at most three trimmed, non-empty strings."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    cleaned = [v.strip() for v in value if isinstance(v, str) and v.strip()]
    return cleaned[:MAX_PER_SITUATION]


class AlternativesResponse(BaseModel):
    """Oracle reply: one list of phrasings per situation."""

    item: str | None = None
    results: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("item", mode="before")
    @classmethod
    def _item_string(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("results", mode="before")
    @classmethod
    def _coerce_results(cls, value: Any) -> dict[str, list[str]]:
        if not isinstance(value, dict):
            return {}
        return {key: _to_text_list(value.get(key)) for key in SITUATIONS}

    def require_all_situations(self) -> dict[str, list[str]]:
        """Return the per-situation lists, failing if any situation came back empty."""
        missing = [key for key in SITUATIONS if not self.results.get(key)]
        if missing:
            raise UpstreamError(f"No alternatives for {', '.join(missing)}")
        return {key: self.results[key] for key in SITUATIONS}


@dataclass
class AlternativesView:
    """All stored alternatives for an item, grouped by situation."""

    item: str
    results: dict[str, list[str]] = field(default_factory=empty_results)

    def to_dict(self) -> dict[str, Any]:
        return {"item": self.item, "results": self.results}

    @property
    def total(self) -> int:
        return sum(len(texts) for texts in self.results.values())


class AlternativesEngine:
    """Generate, store, and aggregate situational alternatives."""

    def __init__(self, session: AsyncSession, model: str | None = None) -> None:
        self.session = session
        self.model = model or settings.alternatives_model

    async def aggregate(self, item: str) -> AlternativesView:
        """
        Build the authoritative view of everything stored for an item.

        Records are read oldest first and de-duplicated case-insensitively
        per situation, keeping the first spelling seen.
        """
        normalized_item = (item or "").strip()
        if not normalized_item:
            return AlternativesView(item=item or "")

        records = await storage.find_alternatives(self.session, normalized_item)
        results = empty_results()
        seen: dict[str, set[str]] = {key: set() for key in SITUATIONS}
        for record in records:
            if record.situation not in results:
                continue
            key = record.alternative_text.lower()
            if key in seen[record.situation]:
                continue
            seen[record.situation].add(key)
            results[record.situation].append(record.alternative_text)

        return AlternativesView(item=normalized_item, results=results)

    async def generate(self, item: str) -> AlternativesView:
        """
        Ask the oracle for new alternatives, store the novel ones, and
        return the full accumulated view for the item.

        Raises:
            ValidationError: Item is empty
            ConfigurationError: Oracle not configured
            UpstreamError: Oracle failed or left a situation empty
        """
        normalized_item = (item or "").strip()
        if not normalized_item:
            raise ValidationError("item is required")

        reply = await structured_completion(
            system_prompt=ALTERNATIVES_SYSTEM_PROMPT,
            payload=f'Ausdruck: "{normalized_item}"',
            response_model=AlternativesResponse,
            temperature=0.8,
            model=self.model,
            schema_hint=ALTERNATIVES_SCHEMA_HINT,
            feature="AI alternatives",
        )
        generated = reply.data.require_all_situations()

        records = await self._novel_records(normalized_item, generated, reply.model)
        await storage.insert_alternatives(self.session, records)
        logger.info(
            f"Stored {len(records)} new alternatives for '{normalized_item}' "
            f"({sum(len(v) for v in generated.values())} generated)"
        )

        return await self.aggregate(normalized_item)

    async def _novel_records(
        self, item: str, generated: dict[str, list[str]], model_version: str
    ) -> list[Alternative]:
        """Keep only texts not yet stored for their situation (case-insensitive)."""
        existing: dict[str, set[str]] = {key: set() for key in SITUATIONS}
        for record in await storage.find_alternatives(self.session, item):
            if record.situation in existing and record.alternative_text:
                existing[record.situation].add(record.alternative_text.lower())

        timestamp = utcnow()
        records: list[Alternative] = []
        for situation in SITUATIONS:
            for text in generated[situation]:
                key = text.lower()
                if key in existing[situation]:
                    continue
                existing[situation].add(key)
                records.append(
                    Alternative(
                        item=item,
                        situation=situation,
                        alternative_text=text,
                        timestamp=timestamp,
                        model_version=model_version,
                    )
                )
        return records

    async def delete_all(self, item: str) -> AlternativesView:
        """Remove every stored alternative for the item."""
        normalized_item = (item or "").strip()
        deleted = await storage.delete_alternatives(self.session, normalized_item)
        logger.info(f"Deleted {deleted} alternatives for '{normalized_item}'")
        return AlternativesView(item=normalized_item)

    async def summary(self) -> dict[str, int]:
        """Stored alternative count per item."""
        return await storage.alternatives_count_by_item(self.session)
