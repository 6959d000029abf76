import events
from connections import ConnectionRegistry
from group_rooms import RoomDirectory
from logging_config import get_logger
from presence import PresenceDirectory

logger = get_logger(__name__)


class BroadcastNotifier:
    """Pushes full directory snapshots to every live connection.

    No diffing and no per-recipient filtering: each publish costs one send
    per live connection.
    """

    def __init__(self, registry: ConnectionRegistry, presence: PresenceDirectory, rooms: RoomDirectory):
        self.registry = registry
        self.presence = presence
        self.rooms = rooms

    async def _publish(self, kind: str, entries: list) -> int:
        # Payload is built before the first await so it reflects the
        # directory exactly as the caller left it.
        payload = {"event": kind, "data": [entry.to_wire() for entry in entries]}
        delivered = await self.registry.broadcast(events.BROADCAST, payload)
        logger.debug(f"Published {kind} snapshot ({len(entries)} entries) to {delivered} connections")
        return delivered

    async def publish_active_users(self) -> int:
        return await self._publish(events.ACTIVE_USERS, self.presence.snapshot())

    async def publish_group_call_rooms(self) -> int:
        return await self._publish(events.GROUP_CALL_ROOMS, self.rooms.snapshot())
