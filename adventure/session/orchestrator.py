from __future__ import annotations

import logging
import time
from collections.abc import Callable
from uuid import UUID, uuid4

from adventure.engine.adapter import EngineAdapter
from adventure.hints.countdown import Scheduler
from adventure.hints.disclosure import HintDisclosure
from adventure.history import MAX_HISTORY, HistoryNavigator, RecallDirection
from adventure.lines import Line, LineLog
from adventure.output import process_update
from adventure.settings import DEFAULT_HINT_BASE_MS, DEFAULT_TITLE
from adventure.slots import SlotStore

logger = logging.getLogger(__name__)

MAX_DRAIN_ITERATIONS = 100

HINT_COMMANDS = frozenset({"hint", "help"})

BANNER_RULE = "═" * 63


def is_hint_command(command: str) -> bool:
    return command.strip().lower() in HINT_COMMANDS


def auto_slot_name() -> str:
    return f"save_{int(time.time() * 1000)}"


class Session:
    """One operator's play session.

    Owns the line stream, command history, hint disclosure and the cached
    location; talks to the engine only through the adapter and to storage only
    through the slot store. Nothing here raises for engine or storage trouble:
    failures show up as marker lines or as no-ops.
    """

    def __init__(
        self,
        *,
        adapter: EngineAdapter,
        slots: SlotStore,
        session_id: UUID | None = None,
        title: str = DEFAULT_TITLE,
        hint_base_ms: int = DEFAULT_HINT_BASE_MS,
        history_capacity: int = MAX_HISTORY,
        scheduler_factory: Callable[[], Scheduler] | None = None,
    ) -> None:
        self.session_id = session_id or uuid4()
        self.title = title
        self.adapter = adapter
        self.slots = slots
        self.log = LineLog()
        self.location = ""
        self.history = HistoryNavigator(capacity=history_capacity, on_record=slots.set_last_command)
        if scheduler_factory is None:
            self.hints = HintDisclosure(adapter, base_ms=hint_base_ms)
        else:
            self.hints = HintDisclosure(adapter, base_ms=hint_base_ms, scheduler_factory=scheduler_factory)

    @property
    def lines(self) -> list[Line]:
        return self.log.lines

    # Lifecycle

    def start(self) -> None:
        """Create the engine, print the banner and show the opening text."""

        if not self.adapter.create():
            self._emit(f"ERROR: {self.adapter.error or 'Failed to start the narrative engine'}")
            self._emit("")
            self._emit("Set ADVENTURE_ENGINE to a 'package.module:factory' engine path.")
            return

        self._emit(BANNER_RULE)
        self._emit(f"  {self.title}")
        self._emit(BANNER_RULE)
        self._emit("")
        self._emit("Narrative engine loaded successfully.")
        self._emit("Type commands and press ENTER to interact with the game.")
        self._emit("Type 'hint' to browse hints for your current location.")
        self._emit("")
        self._run_turn()

    def close(self) -> None:
        self.hints.close()

    # Turn loop

    def submit(self, command: str) -> list[Line]:
        """Echo, record and feed one operator command; returns the lines it produced."""

        mark = self.log.last_id
        trimmed = command.strip()
        self._emit(f"> {command}", is_input=True)
        self.history.record(trimmed)

        if not self.adapter.is_ready:
            return self.log.after(mark)

        if is_hint_command(trimmed):
            # Fed to the engine too so its own turn state stays consistent.
            self.adapter.feed(trimmed.lower())
            self._run_turn()
            self.hints.open(self.location)
        else:
            # Even an empty command is a turn for some engine states.
            self.adapter.feed(trimmed)
            self._run_turn()
        return self.log.after(mark)

    def recall(self, direction: RecallDirection | str) -> str | None:
        return self.history.recall(direction)

    def drain(self) -> int:
        """Step the engine until it reports no pending work, then print its output.

        Returns the number of steps taken. The iteration ceiling keeps a
        misbehaving engine from stalling the session.
        """

        steps = 0
        has_more = True
        while has_more and steps < MAX_DRAIN_ITERATIONS:
            has_more = self.adapter.step()
            steps += 1
        if has_more:
            logger.warning("Drain stopped at %d steps with work still pending", steps)

        self.log.extend(process_update(self.adapter.get_updates()))
        return steps

    def refresh_location(self) -> str:
        self.location = self.adapter.get_location()
        return self.location

    # Side commands

    def undo(self) -> bool:
        if not self.adapter.undo():
            self._emit("[Nothing to undo]")
            return False
        self._emit("[UNDO]")
        self._run_turn()
        return True

    def redo(self) -> bool:
        if not self.adapter.redo():
            self._emit("[Nothing to redo]")
            return False
        self._emit("[REDO]")
        self._run_turn()
        return True

    def save(self, slot: str | None = None) -> bool:
        name = (slot or "").strip() or auto_slot_name()
        data = self.adapter.save()
        if data and self.slots.write(name, data):
            self._emit(f"[Game saved to slot: {name}]")
            return True
        self._emit("[Save failed]")
        return False

    def load(self, slot: str) -> bool:
        data = self.slots.read(slot)
        if not data or not self.adapter.restore(data):
            self._emit("[Load failed]")
            return False

        self._emit(f"[Game loaded from slot: {slot}]")
        self.drain()

        # Replay the last command so the output matches the restored state.
        last = self.slots.last_command()
        if last:
            self._emit(f"> {last}", is_input=True)
            self.adapter.feed(last)
            self.drain()

        self.refresh_location()
        return True

    def delete_slot(self, slot: str) -> bool:
        if self.slots.delete(slot):
            self._emit(f"[Deleted save slot: {slot}]")
            return True
        self._emit("[Delete failed]")
        return False

    def list_slots(self) -> list[str]:
        return self.slots.list_slots()

    def clear(self) -> None:
        self.log.clear()

    def open_hints(self) -> None:
        self.hints.open(self.location)

    def _run_turn(self) -> None:
        self.drain()
        self.refresh_location()

    def _emit(self, content: str, *, is_input: bool = False) -> Line:
        return self.log.append(content, is_input=is_input)
