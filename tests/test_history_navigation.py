from __future__ import annotations

from adventure.history import (
    NOT_NAVIGATING,
    CommandHistory,
    HistoryNavigator,
    RecallDirection,
    recall_command,
    record_command,
)


def test_record_prepends_and_resets_cursor() -> None:
    h = record_command(CommandHistory(), "look")
    h = record_command(h, "north")
    assert h.entries == ("north", "look")
    assert h.cursor == NOT_NAVIGATING


def test_record_blank_is_noop() -> None:
    h = record_command(CommandHistory(), "look")
    assert record_command(h, "   ") is h
    assert record_command(h, "") is h


def test_recording_existing_command_moves_it_to_front() -> None:
    h = CommandHistory()
    for cmd in ["look", "north", "look"]:
        h = record_command(h, cmd)
    assert h.entries == ("look", "north")


def test_capacity_drops_oldest() -> None:
    h = CommandHistory(capacity=3)
    for cmd in ["a", "b", "c", "d"]:
        h = record_command(h, cmd)
    assert h.entries == ("d", "c", "b")


def test_recall_on_empty_history_returns_none() -> None:
    h = CommandHistory()
    h2, value = recall_command(h, RecallDirection.older)
    assert value is None
    assert h2 == h


def test_recall_walks_older_then_back_to_empty() -> None:
    h = CommandHistory()
    for cmd in ["take lamp", "north", "open door"]:
        h = record_command(h, cmd)

    seen = []
    for _ in range(4):
        h, value = recall_command(h, RecallDirection.older)
        seen.append((h.cursor, value))
    assert seen == [(0, "open door"), (1, "north"), (2, "take lamp"), (2, "take lamp")]

    seen = []
    for _ in range(4):
        h, value = recall_command(h, RecallDirection.newer)
        seen.append((h.cursor, value))
    assert seen == [(1, "north"), (0, "open door"), (-1, ""), (-1, "")]


def test_navigator_persists_recorded_commands() -> None:
    stored: list[str] = []
    nav = HistoryNavigator(on_record=stored.append)

    nav.record("inventory")
    nav.record("  ")
    nav.record("look")

    assert stored == ["inventory", "look"]
    assert nav.entries == ("look", "inventory")


def test_navigator_recall_accepts_plain_strings() -> None:
    nav = HistoryNavigator()
    nav.record("wait")
    assert nav.recall("older") == "wait"
    assert nav.recall("newer") == ""
    assert nav.cursor == NOT_NAVIGATING


def test_recording_while_navigating_resets_cursor() -> None:
    nav = HistoryNavigator()
    nav.record("a")
    nav.record("b")
    nav.recall(RecallDirection.older)
    nav.recall(RecallDirection.older)
    assert nav.cursor == 1

    nav.record("c")
    assert nav.cursor == NOT_NAVIGATING
    assert nav.recall(RecallDirection.older) == "c"
