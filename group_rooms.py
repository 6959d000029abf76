import uuid
from typing import List, Optional

import events
from connections import ConnectionRegistry
from logging_config import get_logger
from schemas.signaling import Room

logger = get_logger(__name__)


class RoomDirectory:
    """Active group-call rooms, in creation order.

    Each room id doubles as a registry topic. The host subscribes on
    creation, joiners on join, so room-scoped events reach whoever is
    currently subscribed. Removing a room never touches the topic.
    """

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry
        self.rooms: List[Room] = []

    def _new_room_id(self) -> str:
        active = {room.room_id for room in self.rooms}
        room_id = str(uuid.uuid4())
        while room_id in active:
            room_id = str(uuid.uuid4())
        return room_id

    def create_room(self, connection_id: str, peer_id: str, host_name: Optional[str] = None) -> str:
        room_id = self._new_room_id()
        self.registry.subscribe(connection_id, room_id)
        self.rooms.append(Room(room_id=room_id, peer_id=peer_id, host_name=host_name, socket_id=connection_id))
        logger.info(f"Room {room_id} created by {host_name} (connection {connection_id}, peer {peer_id})")
        return room_id

    async def join_room(self, connection_id: str, room_id: str, peer_id: str, stream_id: Optional[str] = None) -> int:
        """Announce the joiner to the current subscribers, then subscribe it.

        The room id is not checked against the directory; joining a topic
        nobody listens on just subscribes the caller.
        """
        if self.get(room_id) is None:
            logger.debug(f"Connection {connection_id} joining unlisted room {room_id}")
        notified = await self.registry.emit_to_topic(
            room_id,
            events.GROUP_CALL_JOIN_REQUEST,
            {"peerId": peer_id, "streamId": stream_id},
        )
        self.registry.subscribe(connection_id, room_id)
        logger.info(f"Connection {connection_id} joined room {room_id}, notified {notified} subscribers")
        return notified

    async def leave_room(self, connection_id: str, room_id: str, stream_id: Optional[str] = None) -> int:
        self.registry.unsubscribe(connection_id, room_id)
        notified = await self.registry.emit_to_topic(
            room_id,
            events.GROUP_CALL_USER_LEFT,
            {"streamId": stream_id},
        )
        logger.info(f"Connection {connection_id} left room {room_id}, notified {notified} subscribers")
        return notified

    def close_room_by_host(self, peer_id: str) -> int:
        # Joined participants stay subscribed and are not told.
        remaining = [room for room in self.rooms if room.peer_id != peer_id]
        removed = len(self.rooms) - len(remaining)
        self.rooms = remaining
        logger.info(f"Host peer {peer_id} closed {removed} rooms")
        return removed

    def remove_by_connection(self, connection_id: str) -> int:
        remaining = [room for room in self.rooms if room.socket_id != connection_id]
        removed = len(self.rooms) - len(remaining)
        self.rooms = remaining
        if removed:
            logger.info(f"Removed {removed} rooms hosted by connection {connection_id}")
        return removed

    def get(self, room_id: str) -> Optional[Room]:
        for room in self.rooms:
            if room.room_id == room_id:
                return room
        return None

    def snapshot(self) -> List[Room]:
        return [room.model_copy() for room in self.rooms]
