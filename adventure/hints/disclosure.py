from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from adventure.engine.adapter import EngineAdapter
from adventure.hints.catalog import HintQuestion, parse_catalog
from adventure.hints.countdown import TICK_MS, Countdown, Scheduler
from adventure.hints.fsm import HintFSM, HintPhase
from adventure.hints.state import (
    BASE_COUNTDOWN_MS,
    HintSessionState,
    countdown_duration_ms,
    mark_revealed,
    reset_selection,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HintView:
    """Snapshot of the disclosure state for the presentation layer."""

    phase: HintPhase
    location: str
    questions: tuple[HintQuestion, ...]
    selected: int | None
    question: str | None
    level: int
    level_count: int
    answer: str
    has_next_level: bool
    can_reveal_next: bool
    countdown_ms: int | None
    remaining_fraction: float | None
    remaining_seconds: int | None
    global_hints_shown: int


def _running_loop() -> Scheduler:
    return asyncio.get_running_loop()


class HintDisclosure:
    """Per-location question catalog with a session-wide escalating countdown.

    Selecting a question shows its weakest answer and starts a countdown of
    `base_ms * 2^global_hints_shown` (exponent read when the countdown starts).
    When the countdown elapses the next level may be requested. Each distinct
    (question, level) pair bumps `global_hints_shown` once per session.

    Only one countdown exists at a time; every exit from a revealing/ready
    phase cancels it.
    """

    def __init__(
        self,
        adapter: EngineAdapter,
        *,
        scheduler_factory: Callable[[], Scheduler] = _running_loop,
        base_ms: int = BASE_COUNTDOWN_MS,
        tick_ms: int = TICK_MS,
        state: HintSessionState | None = None,
    ) -> None:
        self._adapter = adapter
        self._scheduler_factory = scheduler_factory
        self.base_ms = base_ms
        self.tick_ms = tick_ms
        self.state = state if state is not None else HintSessionState()
        self.fsm = HintFSM()
        self.location = ""
        self.questions: list[HintQuestion] = []
        self.answer = ""
        self._countdown: Countdown | None = None

    @property
    def phase(self) -> HintPhase:
        return self.fsm.phase

    @property
    def is_open(self) -> bool:
        return self.phase != HintPhase.closed

    @property
    def selected_question(self) -> HintQuestion | None:
        if self.state.selected is None:
            return None
        return self.questions[self.state.selected]

    @property
    def countdown(self) -> Countdown | None:
        return self._countdown

    def open(self, location: str) -> None:
        """Load the catalog for `location` and show the question list."""

        self._cancel_countdown()
        self.location = location
        self.questions = parse_catalog(self._adapter.get_hints_for_location(location), location=location)
        reset_selection(self.state)
        self.answer = ""
        self.fsm.open()
        logger.debug("Hint catalog opened for %r with %d questions", location, len(self.questions))

    def select(self, position: int) -> bool:
        if not self.is_open:
            return False
        if not 0 <= position < len(self.questions):
            logger.warning("Hint question position %d not found (catalog has %d)", position, len(self.questions))
            return False

        self._cancel_countdown()
        self.state.selected = position
        self.state.level = 0
        self.answer = self._answer_for(self.questions[position], 0)
        self.fsm.select()
        self._start_countdown()
        return True

    def reveal_next(self) -> bool:
        """Advance to the next level once the countdown has elapsed.

        Returns True when a new level is shown. With no further level the
        question becomes exhausted and False is returned.
        """

        if self.phase != HintPhase.ready:
            return False
        question = self.selected_question
        if question is None:
            return False

        next_level = self.state.level + 1
        if next_level >= question.level_count:
            self._cancel_countdown()
            self.fsm.exhaust()
            return False

        self.state.level = next_level
        self.answer = self._answer_for(question, next_level)
        self.fsm.advance()
        self._start_countdown()
        return True

    def back(self) -> None:
        if not self.is_open:
            return
        self._cancel_countdown()
        reset_selection(self.state)
        self.answer = ""
        self.fsm.back()

    def close(self) -> None:
        self._cancel_countdown()
        reset_selection(self.state)
        self.answer = ""
        self.fsm.close()

    def view(self) -> HintView:
        question = self.selected_question
        countdown = self._countdown
        counting = countdown is not None and self.phase == HintPhase.revealing
        level_count = question.level_count if question is not None else 0
        return HintView(
            phase=self.phase,
            location=self.location,
            questions=tuple(self.questions),
            selected=self.state.selected,
            question=question.question if question is not None else None,
            level=self.state.level,
            level_count=level_count,
            answer=self.answer,
            has_next_level=question is not None and self.state.level + 1 < level_count,
            can_reveal_next=self.phase == HintPhase.ready,
            countdown_ms=countdown.duration_ms if counting else None,
            remaining_fraction=countdown.remaining_fraction if counting else None,
            remaining_seconds=countdown.remaining_seconds if counting else None,
            global_hints_shown=self.state.global_hints_shown,
        )

    def _answer_for(self, question: HintQuestion, level: int) -> str:
        return self._adapter.get_hint_answer(question.index, level) or question.answer_at(level)

    def _start_countdown(self) -> None:
        question = self.selected_question
        if question is None:
            return
        self._cancel_countdown()

        # Duration uses the count before this display is recorded.
        duration = countdown_duration_ms(self.state, base_ms=self.base_ms)
        mark_revealed(self.state, question.index, self.state.level)

        countdown = Countdown(
            duration_ms=duration,
            scheduler=self._scheduler_factory(),
            on_complete=self._on_countdown_complete,
            interval_ms=self.tick_ms,
        )
        self._countdown = countdown
        countdown.start()

    def _cancel_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    def _on_countdown_complete(self) -> None:
        if self.phase != HintPhase.revealing:
            return
        self.fsm.elapse()
