import logging
from fastapi import WebSocket
from typing import Any, Dict, Set

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self):
        self.active_connections: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.active_connections.add(websocket)
        logger.info("WebSocket connected (%d open)", len(self.active_connections))

    def disconnect(self, websocket: WebSocket) -> None:
        self.active_connections.discard(websocket)
        logger.info("WebSocket disconnected (%d open)", len(self.active_connections))

    async def broadcast(self, event: Dict[str, Any]) -> int:
        """
        Send an event to every open connection.

        Iterates over a snapshot so connects/disconnects during the send are
        safe; a connection whose send fails is dropped. Returns the number of
        connections that received the event.
        """
        delivered = 0
        for connection in list(self.active_connections):
            try:
                await connection.send_json(event)
                delivered += 1
            except Exception as e:
                # Remove broken connection
                logger.warning("Dropping WebSocket after failed send: %s", e)
                self.active_connections.discard(connection)
        return delivered
