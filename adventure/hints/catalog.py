from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)


class HintQuestionPayload(BaseModel):
    question: str
    answers: list[str] = Field(default_factory=list)
    section: str = ""
    tags: list[str] = Field(default_factory=list)


# The engine sends `[[index, {question, answers, section, tags}], ...]`.
_CATALOG_ADAPTER = TypeAdapter(list[tuple[int, HintQuestionPayload]])


@dataclass(frozen=True, slots=True)
class HintQuestion:
    index: int
    question: str
    answers: tuple[str, ...]
    location: str
    section: str = ""
    tags: frozenset[str] = frozenset()

    @property
    def level_count(self) -> int:
        return len(self.answers)

    def answer_at(self, level: int) -> str:
        if 0 <= level < len(self.answers):
            return self.answers[level]
        return ""


def parse_catalog(raw: str | bytes | None, *, location: str) -> list[HintQuestion]:
    """Parse the engine's JSON hint list for a location.

    Anything malformed yields an empty catalog; the problem is logged, not raised.
    """

    if not raw:
        return []
    try:
        entries = _CATALOG_ADAPTER.validate_json(raw)
    except ValidationError as e:
        logger.warning("Malformed hint catalog for %r (%d validation errors)", location, e.error_count())
        return []

    return [
        HintQuestion(
            index=index,
            question=payload.question,
            answers=tuple(payload.answers),
            location=location,
            section=payload.section,
            tags=frozenset(payload.tags),
        )
        for index, payload in entries
    ]
