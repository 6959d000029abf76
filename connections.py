import asyncio
import uuid
from typing import Any, Dict, Iterable, List, Optional, Set

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from logging_config import get_logger

logger = get_logger(__name__)


async def safe_send_json(websocket: WebSocket, data: dict) -> bool:
    """Send a JSON frame, returning False instead of raising if the socket has gone away."""
    if websocket.application_state != WebSocketState.CONNECTED:
        return False
    try:
        await websocket.send_json(data)
        return True
    except (WebSocketDisconnect, RuntimeError, OSError) as e:
        logger.debug(f"Failed to send websocket message: {e}")
        return False


class ConnectionRegistry:
    """Live connections and their topic memberships.

    Topics work like socket.io rooms: a connection can subscribe to any
    number of string topics, and an emit to a topic reaches every
    subscribed live connection. Nothing here outlives the process.
    """

    def __init__(self):
        # {connection_id: websocket}
        self.connections: Dict[str, WebSocket] = {}
        # {topic: {connection_id, ...}}
        self.topics: Dict[str, Set[str]] = {}
        # {connection_id: {topic, ...}}
        self.memberships: Dict[str, Set[str]] = {}

    def on_accept(self, websocket: WebSocket) -> str:
        connection_id = uuid.uuid4().hex
        while connection_id in self.connections:
            connection_id = uuid.uuid4().hex
        self.connections[connection_id] = websocket
        self.memberships[connection_id] = set()
        logger.debug(f"Registered connection {connection_id} (live connections: {len(self.connections)})")
        return connection_id

    def on_close(self, connection_id: str) -> bool:
        """Forget a connection and all of its topic memberships.

        Returns False when the connection was already closed, so callers
        can run teardown exactly once.
        """
        websocket = self.connections.pop(connection_id, None)
        if websocket is None:
            return False
        for topic in self.memberships.pop(connection_id, set()):
            self._discard_member(topic, connection_id)
        logger.debug(f"Unregistered connection {connection_id} (live connections: {len(self.connections)})")
        return True

    def is_live(self, connection_id: Optional[str]) -> bool:
        return connection_id is not None and connection_id in self.connections

    def live_ids(self) -> List[str]:
        return list(self.connections.keys())

    def subscribe(self, connection_id: str, topic: str):
        if not self.is_live(connection_id):
            logger.debug(f"Ignoring subscribe of closed connection {connection_id} to topic {topic}")
            return
        self.topics.setdefault(topic, set()).add(connection_id)
        self.memberships[connection_id].add(topic)

    def unsubscribe(self, connection_id: str, topic: str):
        self._discard_member(topic, connection_id)
        if connection_id in self.memberships:
            self.memberships[connection_id].discard(topic)

    def members(self, topic: str) -> Set[str]:
        return set(self.topics.get(topic, set()))

    def _discard_member(self, topic: str, connection_id: str):
        members = self.topics.get(topic)
        if members is None:
            return
        members.discard(connection_id)
        if not members:
            del self.topics[topic]

    async def send(self, connection_id: Optional[str], event: str, payload: Any = None) -> bool:
        """Deliver one frame to one connection. Stale ids are dropped silently."""
        if not self.is_live(connection_id):
            logger.debug(f"Dropping {event} for stale connection {connection_id}")
            return False
        websocket = self.connections[connection_id]
        return await safe_send_json(websocket, {"event": event, "data": payload})

    async def send_many(self, connection_ids: Iterable[str], event: str, payload: Any = None) -> int:
        send_tasks = [self.send(connection_id, event, payload) for connection_id in connection_ids]
        if not send_tasks:
            return 0
        results = await asyncio.gather(*send_tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.warning(f"Unexpected error delivering {event}: {result}")
        return sum(1 for delivered in results if delivered is True)

    async def broadcast(self, event: str, payload: Any = None) -> int:
        delivered = await self.send_many(self.live_ids(), event, payload)
        logger.debug(f"Broadcast {event} delivered to {delivered}/{len(self.connections)} connections")
        return delivered

    async def emit_to_topic(self, topic: str, event: str, payload: Any = None) -> int:
        """Send to every current subscriber of a topic; an unknown topic is a no-op."""
        members = self.members(topic)
        if not members:
            logger.debug(f"No subscribers for topic {topic}, dropping {event}")
            return 0
        return await self.send_many(members, event, payload)
