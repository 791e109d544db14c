import logging
from typing import Any, Dict
from src.notifications.connection_manager import ConnectionManager
from src.notifications.schemas import RealtimeEvent

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for publishing realtime events to connected clients"""

    def __init__(self, connection_manager: ConnectionManager):
        self.connection_manager = connection_manager

    async def publish(self, event_type: str, data: Dict[str, Any]) -> int:
        """Broadcast an event to all connections; returns the delivery count"""
        event = RealtimeEvent(type=event_type, data=data)
        delivered = await self.connection_manager.broadcast(event.model_dump())
        logger.debug("Published %s to %d connections", event_type, delivered)
        return delivered
