from __future__ import annotations

import json
import os
from collections.abc import Callable, Generator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import fakeredis
import pytest

from adventure.engine.adapter import EngineAdapter
from adventure.session.orchestrator import Session
from adventure.slots import SlotStore


@pytest.fixture(scope="session", autouse=True)
def _load_dotenv_for_tests() -> None:
    """Load repo .env for local runs (PyCharm/CLI).

    In CI, we *don't* auto-load `.env` by default.
    Opt-in with: ADVENTURE_LOAD_DOTENV_FOR_TESTS=1
    """

    if os.environ.get("CI") and os.environ.get("ADVENTURE_LOAD_DOTENV_FOR_TESTS") != "1":
        return

    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


MAILBOX_HINTS = [
    [
        3,
        {
            "question": "How do I open the mailbox?",
            "answers": ["Have you looked at it?", "Try OPEN MAILBOX.", "Read the leaflet inside."],
            "section": "West of House",
            "tags": ["loc:west of house", "act:1"],
        },
    ],
    [
        7,
        {
            "question": "Where does the path lead?",
            "answers": ["North.", "Into the forest."],
            "section": "West of House",
            "tags": ["loc:west of house"],
        },
    ],
]


class ScriptedEngine:
    """Engine fake driven by canned responses.

    `responses` maps a fed command to the update record the next `get_updates()`
    returns. Every call is appended to `calls`.
    """

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.fed: list[str] = []
        self.restored: list[str] = []
        self.opening: dict[str, Any] | None = {"output": "<span>West of House</span><br><span>You are standing in an open field.</span><br>"}
        self.responses: dict[str, dict[str, Any]] = {}
        self.location = "West of House"
        self.locations_after: dict[str, str] = {}
        self.hints: dict[str, str] = {"West of House": json.dumps(MAILBOX_HINTS)}
        self.hint_answers: dict[tuple[int, int], str] = {}
        self.steps_per_feed = 2
        self.always_busy = False
        self.fail_create = False
        self.undo_result = False
        self.redo_result = False
        self.undo_update: dict[str, Any] | None = None
        self.save_data: str | None = "quetzal-state-1"
        self.restore_result = True
        self._pending_steps = 0
        self._queued: dict[str, Any] | None = None

    def create(self) -> None:
        self.calls.append("create")
        if self.fail_create:
            raise RuntimeError("story file missing")
        self._queued = self.opening
        self._pending_steps = self.steps_per_feed

    def feed(self, text: str) -> None:
        self.calls.append("feed")
        self.fed.append(text)
        self._queued = self.responses.get(text)
        self._pending_steps = self.steps_per_feed
        if text in self.locations_after:
            self.location = self.locations_after[text]

    def step(self) -> bool:
        self.calls.append("step")
        if self.always_busy:
            return True
        if self._pending_steps > 0:
            self._pending_steps -= 1
        return self._pending_steps > 0

    def get_updates(self) -> dict[str, Any] | None:
        self.calls.append("get_updates")
        queued, self._queued = self._queued, None
        return queued

    def get_location(self) -> str:
        self.calls.append("get_location")
        return self.location

    def get_hints_for_location(self, location: str) -> str:
        self.calls.append("get_hints_for_location")
        return self.hints.get(location, "[]")

    def get_hint_answer(self, index: int, level: int) -> str | None:
        self.calls.append("get_hint_answer")
        return self.hint_answers.get((index, level))

    def undo(self) -> bool:
        self.calls.append("undo")
        if self.undo_result:
            self._queued = self.undo_update
        return self.undo_result

    def redo(self) -> bool:
        self.calls.append("redo")
        return self.redo_result

    def save(self) -> str | None:
        self.calls.append("save")
        return self.save_data

    def restore(self, data: str) -> bool:
        self.calls.append("restore")
        self.restored.append(data)
        return self.restore_result


@dataclass(slots=True)
class ManualHandle:
    when_ms: int
    callback: Callable[[], object]
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass(slots=True)
class ManualScheduler:
    """`call_later` clock that only moves when a test calls `advance`."""

    now_ms: int = 0
    handles: list[ManualHandle] = field(default_factory=list)

    def call_later(self, delay: float, callback: Callable[[], object]) -> ManualHandle:
        handle = ManualHandle(when_ms=self.now_ms + round(delay * 1000), callback=callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[ManualHandle]:
        return [h for h in self.handles if not h.cancelled and not h.fired]

    def advance(self, ms: int) -> None:
        target = self.now_ms + ms
        while True:
            due = sorted((h for h in self.pending if h.when_ms <= target), key=lambda h: h.when_ms)
            if not due:
                break
            handle = due[0]
            self.now_ms = handle.when_ms
            handle.fired = True
            handle.callback()
        self.now_ms = target


@pytest.fixture()
def redis_client() -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture()
def engine() -> ScriptedEngine:
    return ScriptedEngine()


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def adapter(engine: ScriptedEngine) -> EngineAdapter:
    a = EngineAdapter(engine)
    assert a.create()
    return a


@pytest.fixture()
def slots(redis_client: fakeredis.FakeRedis) -> SlotStore:
    return SlotStore(r=redis_client, namespace="test_save", last_command_key="test_last_command")


@pytest.fixture()
def make_session(
    engine: ScriptedEngine, slots: SlotStore, scheduler: ManualScheduler
) -> Generator[Callable[..., Session], None, None]:
    created: list[Session] = []

    def _make(*, start: bool = True, engine_override: ScriptedEngine | None = None, **kwargs: Any) -> Session:
        adapter = EngineAdapter(engine_override if engine_override is not None else engine)
        session = Session(adapter=adapter, slots=slots, scheduler_factory=lambda: scheduler, **kwargs)
        if start:
            session.start()
        created.append(session)
        return session

    yield _make
    for s in created:
        s.close()


@pytest.fixture()
def session(make_session: Callable[..., Session]) -> Session:
    return make_session()
