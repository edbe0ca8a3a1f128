from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class UpdateRecord:
    """One raw emission pulled from the engine after a drain.

    At most one field is expected to be set; an all-empty record means "no output".
    """

    lines: tuple[str, ...] | None = None
    text: str | None = None
    output: str | None = None
    message: str | None = None


EMPTY_UPDATE = UpdateRecord()


class NarrativeEngine(Protocol):
    """Operations the controller needs from a turn-based narrative engine."""

    def create(self) -> None:  # pragma: no cover
        ...

    def feed(self, text: str) -> None:  # pragma: no cover
        ...

    def step(self) -> bool:  # pragma: no cover
        ...

    def get_updates(self) -> Mapping[str, Any] | None:  # pragma: no cover
        ...

    def get_location(self) -> str:  # pragma: no cover
        ...

    def get_hints_for_location(self, location: str) -> str:  # pragma: no cover
        ...

    def get_hint_answer(self, index: int, level: int) -> str | None:  # pragma: no cover
        ...

    def undo(self) -> bool:  # pragma: no cover
        ...

    def redo(self) -> bool:  # pragma: no cover
        ...

    def save(self) -> str | None:  # pragma: no cover
        ...

    def restore(self, data: str) -> bool:  # pragma: no cover
        ...
