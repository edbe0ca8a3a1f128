from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import StrEnum

MAX_HISTORY = 100

# Cursor value meaning "not navigating": the recall field is empty.
NOT_NAVIGATING = -1


class RecallDirection(StrEnum):
    older = "older"
    newer = "newer"


@dataclass(frozen=True, slots=True)
class CommandHistory:
    """Most-recent-first command log without duplicates."""

    entries: tuple[str, ...] = ()
    cursor: int = NOT_NAVIGATING
    capacity: int = MAX_HISTORY


def record_command(history: CommandHistory, command: str) -> CommandHistory:
    if not command.strip():
        return history
    rest = tuple(c for c in history.entries if c != command)
    entries = ((command,) + rest)[: history.capacity]
    return replace(history, entries=entries, cursor=NOT_NAVIGATING)


def recall_command(history: CommandHistory, direction: RecallDirection) -> tuple[CommandHistory, str | None]:
    """Move the cursor one step and return the entry under it.

    Returns None only when there is no history at all; moving past the newest
    entry returns "" (cursor back to NOT_NAVIGATING).
    """

    if not history.entries:
        return history, None

    if direction == RecallDirection.older:
        cursor = min(history.cursor + 1, len(history.entries) - 1)
    else:
        cursor = max(history.cursor - 1, NOT_NAVIGATING)

    value = history.entries[cursor] if cursor >= 0 else ""
    return replace(history, cursor=cursor), value


class HistoryNavigator:
    """Holds the session's CommandHistory and persists each recorded command."""

    def __init__(
        self,
        *,
        capacity: int = MAX_HISTORY,
        on_record: Callable[[str], object] | None = None,
    ) -> None:
        self.state = CommandHistory(capacity=capacity)
        self._on_record = on_record

    @property
    def entries(self) -> tuple[str, ...]:
        return self.state.entries

    @property
    def cursor(self) -> int:
        return self.state.cursor

    def record(self, command: str) -> None:
        if not command.strip():
            return
        self.state = record_command(self.state, command)
        if self._on_record is not None:
            self._on_record(command)

    def recall(self, direction: RecallDirection | str) -> str | None:
        self.state, value = recall_command(self.state, RecallDirection(direction))
        return value
