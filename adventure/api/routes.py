from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, WebSocket, WebSocketDisconnect, status

from adventure.api.deps import get_registry
from adventure.api.models import (
    ActionResponse,
    CommandRequest,
    HintSelectRequest,
    HintViewModel,
    RecallRequest,
    RecallResponse,
    SaveRequest,
    SessionCreateRequest,
    SessionView,
    SlotListResponse,
)
from adventure.session.orchestrator import Session
from adventure.session.registry import SessionRegistry
from adventure.websocket_hub import hub

router = APIRouter()


def _require_session(registry: SessionRegistry, session_id: UUID) -> Session:
    try:
        return registry.require(session_id)
    except KeyError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found") from e


async def _action(session: Session, ok: bool, *, after: int, cleared: bool = False) -> ActionResponse:
    await hub.publish(session, cleared=cleared)
    return ActionResponse(ok=ok, session=SessionView.from_session(session, after=after))


@router.websocket("/ws/session/{session_id}")
async def session_updates_ws(websocket: WebSocket, session_id: UUID, after: int = 0) -> None:
    # `after`: last line id the client already has; pushes start past it.
    sid = str(session_id)
    await hub.connect(sid, websocket, after=after)

    try:
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.disconnect(sid, websocket)
    except Exception:
        await hub.disconnect(sid, websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/session", response_model=SessionView, status_code=status.HTTP_201_CREATED)
async def create_session_route(
    payload: SessionCreateRequest | None = None,
    registry: SessionRegistry = Depends(get_registry),
) -> SessionView:
    session = registry.create(namespace=payload.namespace if payload else None)
    return SessionView.from_session(session)


@router.get("/session/{session_id}", response_model=SessionView)
async def get_session_route(
    session_id: UUID,
    after: int = 0,
    registry: SessionRegistry = Depends(get_registry),
) -> SessionView:
    session = _require_session(registry, session_id)
    return SessionView.from_session(session, after=after)


@router.delete("/session/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session_route(session_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> Response:
    if not registry.close(session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/session/{session_id}/commands", response_model=ActionResponse)
async def submit_command_route(
    session_id: UUID,
    payload: CommandRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> ActionResponse:
    session = _require_session(registry, session_id)
    mark = session.log.last_id
    session.submit(payload.command)
    return await _action(session, True, after=mark)


@router.post("/session/{session_id}/history/recall", response_model=RecallResponse)
async def recall_history_route(
    session_id: UUID,
    payload: RecallRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> RecallResponse:
    session = _require_session(registry, session_id)
    return RecallResponse(value=session.recall(payload.direction))


@router.post("/session/{session_id}/undo", response_model=ActionResponse)
async def undo_route(session_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> ActionResponse:
    session = _require_session(registry, session_id)
    mark = session.log.last_id
    return await _action(session, session.undo(), after=mark)


@router.post("/session/{session_id}/redo", response_model=ActionResponse)
async def redo_route(session_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> ActionResponse:
    session = _require_session(registry, session_id)
    mark = session.log.last_id
    return await _action(session, session.redo(), after=mark)


@router.post("/session/{session_id}/clear", response_model=ActionResponse)
async def clear_route(session_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> ActionResponse:
    session = _require_session(registry, session_id)
    session.clear()
    return await _action(session, True, after=0, cleared=True)


@router.get("/session/{session_id}/slots", response_model=SlotListResponse)
async def list_slots_route(session_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> SlotListResponse:
    session = _require_session(registry, session_id)
    return SlotListResponse(slots=session.list_slots())


@router.post("/session/{session_id}/slots", response_model=ActionResponse)
async def save_slot_route(
    session_id: UUID,
    payload: SaveRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> ActionResponse:
    session = _require_session(registry, session_id)
    mark = session.log.last_id
    return await _action(session, session.save(payload.name), after=mark)


@router.post("/session/{session_id}/slots/{name}/load", response_model=ActionResponse)
async def load_slot_route(
    session_id: UUID,
    name: str,
    registry: SessionRegistry = Depends(get_registry),
) -> ActionResponse:
    session = _require_session(registry, session_id)
    mark = session.log.last_id
    return await _action(session, session.load(name), after=mark)


@router.delete("/session/{session_id}/slots/{name}", response_model=ActionResponse)
async def delete_slot_route(
    session_id: UUID,
    name: str,
    registry: SessionRegistry = Depends(get_registry),
) -> ActionResponse:
    session = _require_session(registry, session_id)
    mark = session.log.last_id
    return await _action(session, session.delete_slot(name), after=mark)


@router.get("/session/{session_id}/hints", response_model=HintViewModel)
async def get_hints_route(session_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> HintViewModel:
    session = _require_session(registry, session_id)
    return HintViewModel.from_view(session.hints.view())


@router.post("/session/{session_id}/hints/open", response_model=HintViewModel)
async def open_hints_route(session_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> HintViewModel:
    session = _require_session(registry, session_id)
    session.open_hints()
    await hub.publish(session)
    return HintViewModel.from_view(session.hints.view())


@router.post("/session/{session_id}/hints/select", response_model=HintViewModel)
async def select_hint_route(
    session_id: UUID,
    payload: HintSelectRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> HintViewModel:
    session = _require_session(registry, session_id)
    try:
        if not session.hints.is_open:
            raise ValueError("Hints are not open")
        if not session.hints.select(payload.position):
            raise ValueError(f"No hint question at position {payload.position}")
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    await hub.publish(session)
    return HintViewModel.from_view(session.hints.view())


@router.post("/session/{session_id}/hints/next", response_model=HintViewModel)
async def next_hint_route(session_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> HintViewModel:
    session = _require_session(registry, session_id)
    session.hints.reveal_next()
    await hub.publish(session)
    return HintViewModel.from_view(session.hints.view())


@router.post("/session/{session_id}/hints/back", response_model=HintViewModel)
async def back_hints_route(session_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> HintViewModel:
    session = _require_session(registry, session_id)
    session.hints.back()
    await hub.publish(session)
    return HintViewModel.from_view(session.hints.view())


@router.post("/session/{session_id}/hints/close", response_model=HintViewModel)
async def close_hints_route(session_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> HintViewModel:
    session = _require_session(registry, session_id)
    session.hints.close()
    await hub.publish(session)
    return HintViewModel.from_view(session.hints.view())
