from __future__ import annotations

import fakeredis
import pytest
import redis

from adventure.slots import SlotStore


def test_write_read_roundtrip_uses_namespaced_key(slots: SlotStore, redis_client: fakeredis.FakeRedis) -> None:
    assert slots.write("kitchen", "payload-1") is True
    assert slots.read("kitchen") == "payload-1"
    assert redis_client.get("test_save_kitchen") == "payload-1"


def test_list_is_sorted_and_scoped_to_namespace(slots: SlotStore, redis_client: fakeredis.FakeRedis) -> None:
    redis_client.set("other_save_zeta", "x")
    for name in ["zeta", "alpha", "Mid"]:
        assert slots.write(name, "data")

    assert slots.list_slots() == ["Mid", "alpha", "zeta"]


def test_write_replaces_existing_slot(slots: SlotStore) -> None:
    slots.write("a", "v1")
    slots.write("a", "v2")
    assert slots.read("a") == "v2"
    assert slots.list_slots() == ["a"]


def test_read_missing_slot_is_none(slots: SlotStore) -> None:
    assert slots.read("nope") is None


def test_delete_removes_slot(slots: SlotStore) -> None:
    slots.write("a", "v1")
    assert slots.delete("a") is True
    assert slots.read("a") is None
    assert slots.list_slots() == []


def test_blank_names_are_rejected(slots: SlotStore) -> None:
    assert slots.write("  ", "data") is False
    assert slots.read("") is None
    assert slots.delete(" ") is False
    assert slots.list_slots() == []


def test_failed_write_keeps_previous_value(
    slots: SlotStore, redis_client: fakeredis.FakeRedis, monkeypatch: pytest.MonkeyPatch
) -> None:
    slots.write("a", "good")

    def _boom(*args: object, **kwargs: object) -> None:
        raise redis.exceptions.ResponseError("OOM command not allowed when used memory > 'maxmemory'")

    monkeypatch.setattr(redis_client, "set", _boom)

    assert slots.write("a", "new") is False
    assert slots.read("a") == "good"


def test_unavailable_medium_degrades_to_neutral_values(monkeypatch: pytest.MonkeyPatch) -> None:
    r = fakeredis.FakeRedis(decode_responses=True)
    store = SlotStore(r=r, namespace="ns", last_command_key="ns_last")

    def _down(*args: object, **kwargs: object) -> None:
        raise redis.exceptions.ConnectionError("connection refused")

    for method in ["set", "get", "delete", "scan_iter"]:
        monkeypatch.setattr(r, method, _down)

    assert store.write("a", "x") is False
    assert store.read("a") is None
    assert store.delete("a") is False
    assert store.list_slots() == []
    assert store.last_command() is None
    assert store.set_last_command("look") is False


def test_last_command_cell(slots: SlotStore, redis_client: fakeredis.FakeRedis) -> None:
    assert slots.last_command() is None
    assert slots.set_last_command("open mailbox")
    assert slots.last_command() == "open mailbox"
    assert redis_client.get("test_last_command") == "open mailbox"


def test_last_command_cell_is_not_listed_even_under_prefix(redis_client: fakeredis.FakeRedis) -> None:
    store = SlotStore(r=redis_client, namespace="game", last_command_key="game_last_command")
    store.set_last_command("look")
    store.write("morning", "data")

    assert store.list_slots() == ["morning"]
    assert store.write("last_command", "data") is False
    assert store.last_command() == "look"


def test_glob_characters_in_namespace_are_literal(redis_client: fakeredis.FakeRedis) -> None:
    store = SlotStore(r=redis_client, namespace="a*", last_command_key="a*_last")
    redis_client.set("abc_other", "x")
    store.write("one", "data")

    assert store.list_slots() == ["one"]


def test_owned_last_command_cells_are_separate(redis_client: fakeredis.FakeRedis) -> None:
    bob = SlotStore(r=redis_client, namespace="game", last_command_key="game_last_command", owner="bob")
    alice = SlotStore(r=redis_client, namespace="game", last_command_key="game_last_command", owner="alice")

    bob.set_last_command("look")
    alice.set_last_command("drop lamp")

    assert bob.last_command() == "look"
    assert alice.last_command() == "drop lamp"
    assert redis_client.get("game_last_command:bob") == "look"

    bob.write("morning", "data")
    assert bob.list_slots() == ["morning"]

    assert bob.clear_last_command()
    assert bob.last_command() is None
    assert alice.last_command() == "drop lamp"


def test_slot_names_cannot_reach_another_sessions_cell(redis_client: fakeredis.FakeRedis) -> None:
    alice = SlotStore(r=redis_client, namespace="game", last_command_key="game_last_command", owner="alice")
    mallory = SlotStore(r=redis_client, namespace="game", last_command_key="game_last_command", owner="mallory")
    alice.set_last_command("xyzzy")

    assert mallory.read("last_command:alice") is None
    assert mallory.delete("last_command:alice") is False
    assert mallory.write("last_command:alice", "data") is False
    assert alice.last_command() == "xyzzy"
