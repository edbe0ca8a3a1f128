from __future__ import annotations

import logging
from collections.abc import Callable
from uuid import UUID, uuid4

import redis

from adventure.engine.adapter import EngineAdapter
from adventure.engine.factory import create_engine_adapter
from adventure.hints.countdown import Scheduler
from adventure.session.orchestrator import Session
from adventure.settings import Settings, settings_from_env
from adventure.slots import SlotStore

logger = logging.getLogger(__name__)


class SessionRegistry:
    """In-process sessions keyed by id.

    Sessions hold a live engine handle and a running hint timer, so they cannot
    live in Redis; only save slots and the last-command cell do. If we later run
    multiple API replicas, requests for a session must be pinned to its process.
    """

    def __init__(
        self,
        *,
        redis_factory: Callable[[], redis.Redis],
        settings: Settings | None = None,
        adapter_factory: Callable[[], EngineAdapter] | None = None,
        scheduler_factory: Callable[[], Scheduler] | None = None,
    ) -> None:
        self._redis_factory = redis_factory
        self._redis: redis.Redis | None = None
        self.settings = settings or settings_from_env()
        self._adapter_factory = adapter_factory or (lambda: create_engine_adapter(self.settings.engine_path))
        self._scheduler_factory = scheduler_factory
        self._sessions: dict[UUID, Session] = {}

    @property
    def redis(self) -> redis.Redis:
        if self._redis is None:
            self._redis = self._redis_factory()
        return self._redis

    def create(self, *, namespace: str | None = None) -> Session:
        session_id = uuid4()
        slots = SlotStore(
            r=self.redis,
            namespace=namespace or self.settings.slot_namespace,
            last_command_key=self.settings.last_command_key,
            owner=str(session_id),
        )
        session = Session(
            session_id=session_id,
            adapter=self._adapter_factory(),
            slots=slots,
            title=self.settings.title,
            hint_base_ms=self.settings.hint_base_ms,
            scheduler_factory=self._scheduler_factory,
        )
        self._sessions[session.session_id] = session
        session.start()
        logger.info("Session %s started (engine ready: %s)", session.session_id, session.adapter.is_ready)
        return session

    def get(self, session_id: UUID) -> Session | None:
        return self._sessions.get(session_id)

    def require(self, session_id: UUID) -> Session:
        session = self.get(session_id)
        if session is None:
            raise KeyError(str(session_id))
        return session

    def close(self, session_id: UUID) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        session.slots.clear_last_command()
        return True

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)
