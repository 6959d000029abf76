import json

from fastapi import WebSocket
from pydantic import ValidationError

import events
from connections import ConnectionRegistry
from errors import MalformedMessageError
from group_rooms import RoomDirectory
from logging_config import get_logger
from notifier import BroadcastNotifier
from presence import PresenceDirectory
from schemas.signaling import Envelope
from signaling import SignalingRouter

logger = get_logger(__name__)


class SignalingBackend:
    """Owns all shared signaling state for one process.

    Every mutation of the registry and the directories happens between
    awaits, on the single event loop, so handlers never observe a half
    applied change. Nothing is persisted; a restart starts empty.
    """

    def __init__(self):
        self.registry = ConnectionRegistry()
        self.presence = PresenceDirectory()
        self.rooms = RoomDirectory(self.registry)
        self.notifier = BroadcastNotifier(self.registry, self.presence, self.rooms)
        self.router = SignalingRouter(self.registry, self.presence, self.rooms, self.notifier)
        logger.info("Initializing in-memory SignalingBackend")

    async def on_accept(self, websocket: WebSocket) -> str:
        connection_id = self.registry.on_accept(websocket)
        logger.info(f"User is connected with id: {connection_id}")
        await self.registry.send(connection_id, events.CONNECTION, {"socketId": connection_id})
        return connection_id

    async def on_close(self, connection_id: str) -> bool:
        """Tear down a connection and publish the resulting snapshots.

        All directory cleanup is applied before the first broadcast is
        awaited. Returns False if the connection was already torn down.
        """
        if not self.registry.on_close(connection_id):
            return False
        removed_users = self.presence.remove_by_connection(connection_id)
        removed_rooms = self.rooms.remove_by_connection(connection_id)
        logger.info(
            f"Connection {connection_id} closed: removed {removed_users} users, {removed_rooms} rooms"
        )
        await self.notifier.publish_active_users()
        await self.notifier.publish_group_call_rooms()
        return True

    def parse_frame(self, raw: str) -> Envelope:
        try:
            message = json.loads(raw)
        except json.JSONDecodeError as e:
            raise MalformedMessageError(f"Frame is not valid JSON: {e}") from e
        if not isinstance(message, dict):
            raise MalformedMessageError("Frame must be a JSON object")
        try:
            return Envelope.model_validate(message)
        except ValidationError as e:
            raise MalformedMessageError(f"Invalid frame envelope: {e.error_count()} errors") from e

    async def handle_frame(self, connection_id: str, raw: str):
        envelope = self.parse_frame(raw)
        await self.router.dispatch(connection_id, envelope.event, envelope.data)


signaling_backend = SignalingBackend()
