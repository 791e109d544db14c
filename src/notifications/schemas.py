from pydantic import BaseModel
from typing import Any

# Event types rebroadcast to every connection
RELAYED_EVENT_TYPES = {"new_post", "new_like"}
# Accepted from clients but not acted on
IGNORED_EVENT_TYPES = {"join_room"}


class RealtimeEvent(BaseModel):
    type: str
    # Opaque to the relay
    data: Any = None


class ConnectionStatus(BaseModel):
    connected: bool
    total_connections: int
