from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import redis

from adventure.settings import DEFAULT_LAST_COMMAND_KEY, DEFAULT_SLOT_NAMESPACE

logger = logging.getLogger(__name__)

_GLOB_SPECIAL_RE = re.compile(r"([*?\[\]\\])")


def _glob_escape(s: str) -> str:
    return _GLOB_SPECIAL_RE.sub(r"\\\1", s)


@dataclass(frozen=True, slots=True)
class SlotStore:
    """Named save slots kept under `"<namespace>_<name>"` keys, plus a last-command cell.

    The last-command cell belongs to one session: with an `owner` it lives at
    `"<last_command_key>:<owner>"`, so sessions sharing a Redis never replay each
    other's commands. Every key in that family is hidden from listings and
    refused as a slot name.

    Every write is a single SET, so a failed write leaves the previous value in place.
    Redis errors are logged and reported as False / None, never raised.
    """

    r: redis.Redis
    namespace: str = DEFAULT_SLOT_NAMESPACE
    last_command_key: str = DEFAULT_LAST_COMMAND_KEY
    owner: str = ""

    @property
    def prefix(self) -> str:
        return f"{self.namespace}_"

    @property
    def last_command_cell(self) -> str:
        if not self.owner:
            return self.last_command_key
        return f"{self.last_command_key}:{self.owner}"

    def slot_key(self, name: str) -> str:
        return f"{self.prefix}{name}"

    def is_last_command_key(self, key: str) -> bool:
        return key == self.last_command_key or key.startswith(f"{self.last_command_key}:")

    def list_slots(self) -> list[str]:
        try:
            keys = list(self.r.scan_iter(match=f"{_glob_escape(self.prefix)}*"))
        except redis.RedisError as e:
            logger.warning("Listing save slots failed: %s", e)
            return []
        names = {str(k)[len(self.prefix) :] for k in keys if not self.is_last_command_key(str(k))}
        return sorted(n for n in names if n)

    def write(self, name: str, payload: str) -> bool:
        if not name.strip():
            return False
        key = self.slot_key(name)
        if self.is_last_command_key(key):
            logger.warning("Refusing to write slot %r: key collides with the last-command cell", name)
            return False
        try:
            self.r.set(key, payload)
        except redis.RedisError as e:
            logger.warning("Writing save slot %r failed: %s", name, e)
            return False
        return True

    def read(self, name: str) -> str | None:
        if not name.strip() or self.is_last_command_key(self.slot_key(name)):
            return None
        try:
            raw = self.r.get(self.slot_key(name))
        except redis.RedisError as e:
            logger.warning("Reading save slot %r failed: %s", name, e)
            return None
        return str(raw) if raw else None

    def delete(self, name: str) -> bool:
        if not name.strip() or self.is_last_command_key(self.slot_key(name)):
            return False
        try:
            self.r.delete(self.slot_key(name))
        except redis.RedisError as e:
            logger.warning("Deleting save slot %r failed: %s", name, e)
            return False
        return True

    def last_command(self) -> str | None:
        try:
            raw = self.r.get(self.last_command_cell)
        except redis.RedisError as e:
            logger.warning("Reading last command failed: %s", e)
            return None
        return str(raw) if raw else None

    def set_last_command(self, command: str) -> bool:
        try:
            self.r.set(self.last_command_cell, command)
        except redis.RedisError as e:
            logger.warning("Storing last command failed: %s", e)
            return False
        return True

    def clear_last_command(self) -> bool:
        try:
            self.r.delete(self.last_command_cell)
        except redis.RedisError as e:
            logger.warning("Clearing last command failed: %s", e)
            return False
        return True
