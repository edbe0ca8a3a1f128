from __future__ import annotations

from dataclasses import dataclass, field

BASE_COUNTDOWN_MS = 5_000


def reveal_key(question_index: int, level: int) -> str:
    return f"{question_index}:{level}"


@dataclass(slots=True)
class HintSessionState:
    """Hint bookkeeping for one play session.

    `revealed` and `global_hints_shown` span the whole session; `selected` and
    `level` describe the question currently open (catalog position, not engine index).
    """

    selected: int | None = None
    level: int = 0
    revealed: set[str] = field(default_factory=set)
    global_hints_shown: int = 0


def countdown_duration_ms(state: HintSessionState, *, base_ms: int = BASE_COUNTDOWN_MS) -> int:
    """Countdown for the next disclosure: base * 2^hints shown so far in the session."""

    return base_ms * (2**state.global_hints_shown)


def mark_revealed(state: HintSessionState, question_index: int, level: int) -> bool:
    """Count a (question, level) display once per session. Returns True if it was new."""

    key = reveal_key(question_index, level)
    if key in state.revealed:
        return False
    state.revealed.add(key)
    state.global_hints_shown += 1
    return True


def reset_selection(state: HintSessionState) -> None:
    state.selected = None
    state.level = 0
