from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field

from adventure.hints.disclosure import HintView
from adventure.hints.fsm import HintPhase
from adventure.history import RecallDirection
from adventure.lines import Line
from adventure.session.orchestrator import Session
from adventure.settings import NAMESPACE_PATTERN


class SessionCreateRequest(BaseModel):
    # Slot namespace ("<namespace>_<slot>" keys); defaults to ADVENTURE_SLOT_NAMESPACE.
    # "_" is not allowed so one namespace prefix never covers another.
    namespace: str | None = Field(default=None, min_length=1, max_length=64, pattern=NAMESPACE_PATTERN)


class CommandRequest(BaseModel):
    # Empty is allowed: a bare submission is a turn for some engine states.
    command: str = Field(default="", max_length=1000)


class RecallRequest(BaseModel):
    direction: RecallDirection


class RecallResponse(BaseModel):
    # None only when the history is empty.
    value: str | None


class SaveRequest(BaseModel):
    # Blank => auto-generated "save_<epoch-ms>".
    name: str = Field(default="", max_length=128)


class HintSelectRequest(BaseModel):
    position: int = Field(..., ge=0)


class LineModel(BaseModel):
    id: int
    content: str
    is_input: bool = False

    @staticmethod
    def from_line(line: Line) -> "LineModel":
        return LineModel(id=line.id, content=line.content, is_input=line.is_input)


class SessionView(BaseModel):
    session_id: UUID
    engine_ready: bool
    location: str
    last_line_id: int
    lines: list[LineModel]
    history_size: int
    hint_phase: HintPhase

    @staticmethod
    def from_session(session: Session, *, after: int = 0) -> "SessionView":
        return SessionView(
            session_id=session.session_id,
            engine_ready=session.adapter.is_ready,
            location=session.location,
            last_line_id=session.log.last_id,
            lines=[LineModel.from_line(line) for line in session.log.after(after)],
            history_size=len(session.history.entries),
            hint_phase=session.hints.phase,
        )


class ActionResponse(BaseModel):
    ok: bool
    session: SessionView


class SlotListResponse(BaseModel):
    slots: list[str]


class HintQuestionModel(BaseModel):
    index: int
    question: str
    section: str = ""
    level_count: int
    tags: list[str] = Field(default_factory=list)


class HintViewModel(BaseModel):
    phase: HintPhase
    location: str
    questions: list[HintQuestionModel]
    selected: int | None = None
    question: str | None = None
    level: int = 0
    level_count: int = 0
    answer: str = ""
    has_next_level: bool = False
    can_reveal_next: bool = False
    countdown_ms: int | None = None
    remaining_fraction: float | None = None
    remaining_seconds: int | None = None
    global_hints_shown: int = 0

    @staticmethod
    def from_view(view: HintView) -> "HintViewModel":
        return HintViewModel(
            phase=view.phase,
            location=view.location,
            questions=[
                HintQuestionModel(
                    index=q.index,
                    question=q.question,
                    section=q.section,
                    level_count=q.level_count,
                    tags=sorted(q.tags),
                )
                for q in view.questions
            ],
            selected=view.selected,
            question=view.question,
            level=view.level,
            level_count=view.level_count,
            answer=view.answer,
            has_next_level=view.has_next_level,
            can_reveal_next=view.can_reveal_next,
            countdown_ms=view.countdown_ms,
            remaining_fraction=view.remaining_fraction,
            remaining_seconds=view.remaining_seconds,
            global_hints_shown=view.global_hints_shown,
        )
