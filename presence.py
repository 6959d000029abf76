from typing import List, Optional

from logging_config import get_logger
from schemas.signaling import PresenceEntry

logger = get_logger(__name__)


class PresenceDirectory:
    """Registered users, in registration order.

    Entries are keyed loosely by connection id: registering twice from the
    same connection yields two entries, and both go away when that
    connection closes.
    """

    def __init__(self):
        self.entries: List[PresenceEntry] = []

    def register(self, connection_id: str, username: str, peer_id: Optional[str] = None) -> PresenceEntry:
        entry = PresenceEntry(username=username, peer_id=peer_id, socket_id=connection_id)
        self.entries.append(entry)
        logger.info(f"User {username} registered from connection {connection_id} (active users: {len(self.entries)})")
        return entry

    def remove_by_connection(self, connection_id: str) -> int:
        remaining = [entry for entry in self.entries if entry.socket_id != connection_id]
        removed = len(self.entries) - len(remaining)
        self.entries = remaining
        if removed:
            logger.info(f"Removed {removed} presence entries for connection {connection_id}")
        return removed

    def snapshot(self) -> List[PresenceEntry]:
        return [entry.model_copy() for entry in self.entries]
