from __future__ import annotations

import os
import re
from dataclasses import dataclass


DEFAULT_SLOT_NAMESPACE = "adventure-save"
DEFAULT_LAST_COMMAND_KEY = "adventure_last_command"
DEFAULT_HINT_BASE_MS = 5_000
DEFAULT_TITLE = "INTERACTIVE FICTION - TERMINAL INTERFACE"

# No "_": slot keys are "<namespace>_<slot>", so an underscore would let one
# namespace's prefix reach into another's keys ("a_" covers "a_b_x").
NAMESPACE_PATTERN = r"^[A-Za-z0-9.-]+$"
_NAMESPACE_RE = re.compile(NAMESPACE_PATTERN)


@dataclass(frozen=True, slots=True)
class Settings:
    # "package.module:factory"; None => no engine, sessions start uninitialized.
    engine_path: str | None
    slot_namespace: str
    last_command_key: str
    hint_base_ms: int
    title: str


def is_valid_namespace(namespace: str) -> bool:
    return bool(_NAMESPACE_RE.match(namespace))


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _namespace_from_env(name: str, default: str) -> str:
    raw = os.environ.get(name) or default
    if not is_valid_namespace(raw):
        raise ValueError(f"{name} may only contain letters, digits, '.' and '-', got {raw!r}")
    return raw


def settings_from_env() -> Settings:
    return Settings(
        engine_path=os.environ.get("ADVENTURE_ENGINE") or None,
        slot_namespace=_namespace_from_env("ADVENTURE_SLOT_NAMESPACE", DEFAULT_SLOT_NAMESPACE),
        last_command_key=os.environ.get("ADVENTURE_LAST_COMMAND_KEY", DEFAULT_LAST_COMMAND_KEY),
        hint_base_ms=_int_from_env("ADVENTURE_HINT_BASE_MS", DEFAULT_HINT_BASE_MS),
        title=os.environ.get("ADVENTURE_TITLE", DEFAULT_TITLE),
    )
