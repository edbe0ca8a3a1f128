from __future__ import annotations

import os

import redis

DEFAULT_REDIS_URL = "redis://localhost:6379/0"

# Slot reads/writes happen inside a request; a dead server should surface as
# "[Save failed]" quickly rather than hang the session.
SOCKET_TIMEOUT_S = 2.0


def get_redis_url() -> str:
    return os.environ.get("REDIS_URL", DEFAULT_REDIS_URL)


def create_redis(url: str | None = None) -> redis.Redis:
    # decode_responses=True => save payloads and slot names come back as str
    return redis.Redis.from_url(
        url or get_redis_url(),
        decode_responses=True,
        socket_timeout=SOCKET_TIMEOUT_S,
        socket_connect_timeout=SOCKET_TIMEOUT_S,
    )
