from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Any

from fastapi import WebSocket

from adventure.session.orchestrator import Session

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LineSubscriber:
    """One WebSocket watching a session's line stream.

    `cursor` is the id of the last line this client has received; the next
    push carries everything after it.
    """

    websocket: WebSocket
    cursor: int = 0


def session_update_payload(session: Session, *, after: int, cleared: bool = False) -> dict[str, Any]:
    return {
        "type": "session_updated",
        "session_id": str(session.session_id),
        "cleared": cleared,
        "last_line_id": session.log.last_id,
        "location": session.location,
        "hint_phase": session.hints.phase.value,
        "lines": [asdict(line) for line in session.log.after(after)],
    }


class SessionWebSocketHub:
    """Pushes new output lines to every WebSocket attached to a session.

    Each subscriber keeps its own cursor, so a client that attached late (or
    missed nothing) is sent exactly the lines it has not seen yet. A clear
    resets nobody's cursor: ids are never reused, so the next push after a
    clear carries only lines appended since.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[LineSubscriber]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, session_id: str, websocket: WebSocket, *, after: int = 0) -> LineSubscriber:
        await websocket.accept()
        subscriber = LineSubscriber(websocket=websocket, cursor=after)
        async with self._lock:
            self._subscribers.setdefault(session_id, []).append(subscriber)
        return subscriber

    async def disconnect(self, session_id: str, websocket: WebSocket) -> None:
        async with self._lock:
            remaining = [s for s in self._subscribers.get(session_id, []) if s.websocket is not websocket]
            if remaining:
                self._subscribers[session_id] = remaining
            else:
                self._subscribers.pop(session_id, None)

    def subscriber_count(self, session_id: str) -> int:
        return len(self._subscribers.get(session_id, []))

    async def publish(self, session: Session, *, cleared: bool = False) -> None:
        sid = str(session.session_id)
        async with self._lock:
            subscribers = list(self._subscribers.get(sid, []))

        for subscriber in subscribers:
            payload = session_update_payload(session, after=subscriber.cursor, cleared=cleared)
            try:
                await subscriber.websocket.send_json(payload)
            except Exception as e:
                logger.debug("Dropping WebSocket for session %s: %s", sid, e)
                await self.disconnect(sid, subscriber.websocket)
                continue
            subscriber.cursor = session.log.last_id


hub = SessionWebSocketHub()
