from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from adventure.engine.base import EMPTY_UPDATE, NarrativeEngine, UpdateRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UPDATE_KEYS = ("lines", "text", "output", "message")


def update_record_from_payload(payload: object) -> UpdateRecord:
    """Coerce whatever the engine handed back into an UpdateRecord.

    Unexpected shapes degrade to an empty record and are only logged.
    """

    if payload is None:
        return EMPTY_UPDATE
    if not isinstance(payload, Mapping):
        logger.warning("Ignoring engine update of unexpected type %s", type(payload).__name__)
        return EMPTY_UPDATE
    if not payload:
        return EMPTY_UPDATE

    known = {k: payload[k] for k in _UPDATE_KEYS if payload.get(k) is not None}
    if not known:
        logger.warning("Ignoring engine update with unknown keys: %s", sorted(map(str, payload.keys())))
        return EMPTY_UPDATE

    lines = known.get("lines")
    if lines is not None:
        if isinstance(lines, (str, bytes)) or not all(isinstance(line, str) for line in lines):
            logger.warning("Ignoring engine update: 'lines' must be a sequence of strings")
            return EMPTY_UPDATE
        lines = tuple(lines)

    for key in ("text", "output", "message"):
        if key in known and not isinstance(known[key], str):
            logger.warning("Ignoring engine update: %r must be a string", key)
            return EMPTY_UPDATE

    return UpdateRecord(
        lines=lines,
        text=known.get("text"),
        output=known.get("output"),
        message=known.get("message"),
    )


class EngineAdapter:
    """Stable facade over a live engine handle.

    Until `create()` succeeds every call is a no-op returning a neutral value
    (False / empty / None), so the session can run during startup or without
    an engine at all. Engine exceptions are logged and mapped to the same
    neutral values.
    """

    def __init__(self, engine: NarrativeEngine | None, *, load_error: str | None = None) -> None:
        self._engine = engine
        self._ready = False
        self.error: str | None = load_error

    @property
    def is_ready(self) -> bool:
        return self._ready

    def create(self) -> bool:
        if self._engine is None:
            if self.error is None:
                self.error = "No narrative engine configured"
            return False
        try:
            self._engine.create()
        except Exception as e:
            logger.exception("Engine create() failed")
            self.error = str(e) or type(e).__name__
            self._ready = False
            return False
        self._ready = True
        self.error = None
        return True

    def _call(self, name: str, default: T, func: Callable[[NarrativeEngine], T]) -> T:
        if not self._ready or self._engine is None:
            return default
        try:
            return func(self._engine)
        except Exception:
            logger.exception("Engine %s() failed", name)
            return default

    def feed(self, text: str) -> None:
        self._call("feed", None, lambda e: e.feed(text))

    def step(self) -> bool:
        return bool(self._call("step", False, lambda e: e.step()))

    def get_updates(self) -> UpdateRecord:
        raw: Any = self._call("get_updates", None, lambda e: e.get_updates())
        return update_record_from_payload(raw)

    def get_location(self) -> str:
        location = self._call("get_location", "", lambda e: e.get_location())
        return location if isinstance(location, str) else ""

    def get_hints_for_location(self, location: str) -> str:
        raw = self._call("get_hints_for_location", "[]", lambda e: e.get_hints_for_location(location))
        return raw if isinstance(raw, str) else "[]"

    def get_hint_answer(self, index: int, level: int) -> str | None:
        answer = self._call("get_hint_answer", None, lambda e: e.get_hint_answer(index, level))
        return answer if isinstance(answer, str) else None

    def undo(self) -> bool:
        return bool(self._call("undo", False, lambda e: e.undo()))

    def redo(self) -> bool:
        return bool(self._call("redo", False, lambda e: e.redo()))

    def save(self) -> str | None:
        data = self._call("save", None, lambda e: e.save())
        # An empty serialization is treated the same as no serialization.
        return data if isinstance(data, str) and data else None

    def restore(self, data: str) -> bool:
        return bool(self._call("restore", False, lambda e: e.restore(data)))
