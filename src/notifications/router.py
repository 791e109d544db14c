import json
import logging
from typing import Any, Dict
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Depends
from pydantic import ValidationError
from src.auth.dependencies import get_current_admin_user
from src.users.models import User
from src.notifications.connection_manager import ConnectionManager
from src.notifications.schemas import (
    RealtimeEvent,
    ConnectionStatus,
    RELAYED_EVENT_TYPES,
    IGNORED_EVENT_TYPES,
)
from src.notifications.dependencies import get_connection_manager

logger = logging.getLogger(__name__)

# Mounted at the application root; clients connect to /ws
ws_router = APIRouter(tags=["Notifications"])

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def parse_event(raw: str) -> Dict[str, Any]:
    """
    Parse a client frame into the object that was sent.

    The frame must be a JSON object with a string `type`; anything else
    raises ValueError. The returned object is left as received.
    """
    try:
        frame = json.loads(raw)
        RealtimeEvent.model_validate(frame)
    except (json.JSONDecodeError, ValidationError) as e:
        raise ValueError(str(e)) from e
    return frame


async def handle_message(raw: str, manager: ConnectionManager) -> None:
    try:
        frame = parse_event(raw)
    except ValueError as e:
        logger.warning("Dropping malformed WebSocket message: %s", e)
        return

    event_type = frame["type"]
    if event_type in RELAYED_EVENT_TYPES:
        await manager.broadcast(frame)
    elif event_type in IGNORED_EVENT_TYPES:
        logger.debug("Ignoring %s message", event_type)
    else:
        logger.warning("Dropping WebSocket message of unknown type %r", event_type)


@ws_router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    manager: ConnectionManager = Depends(get_connection_manager)
):
    await manager.connect(websocket)
    try:
        while True:
            data = await websocket.receive_text()
            await handle_message(data, manager)
    except WebSocketDisconnect:
        # User disconnected
        manager.disconnect(websocket)
    except Exception:
        logger.exception("WebSocket error")
        manager.disconnect(websocket)


@router.get("/status", response_model=ConnectionStatus)
async def get_connection_status(
    current_user: User = Depends(get_current_admin_user),
    manager: ConnectionManager = Depends(get_connection_manager)
):
    """Get current WebSocket connection status (Admin only)"""
    return ConnectionStatus(
        connected=True,
        total_connections=len(manager.active_connections)
    )
