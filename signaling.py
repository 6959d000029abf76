from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Type

from pydantic import ValidationError

import events
from connections import ConnectionRegistry
from errors import MalformedMessageError, UnknownEventError
from group_rooms import RoomDirectory
from logging_config import get_logger
from notifier import BroadcastNotifier
from presence import PresenceDirectory
from schemas.signaling import (
    AnswerPayload,
    CandidatePayload,
    GroupCallCloseByHostPayload,
    GroupCallJoinPayload,
    GroupCallLeavePayload,
    GroupCallRegisterPayload,
    HangUpPayload,
    OfferPayload,
    PreOfferAnswerPayload,
    PreOfferPayload,
    RegisterUserPayload,
    WireModel,
)

logger = get_logger(__name__)

Handler = Callable[[str, Any], Awaitable[None]]


class SignalingRouter:
    """Dispatches one inbound event from one connection.

    One-to-one events are forwarded to whatever connection id the client
    names in the payload; the router does not check that the target is
    actually in a call with the sender. Directory events mutate presence or
    rooms and then publish the new snapshot before returning.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        presence: PresenceDirectory,
        rooms: RoomDirectory,
        notifier: BroadcastNotifier,
    ):
        self.registry = registry
        self.presence = presence
        self.rooms = rooms
        self.notifier = notifier
        self.handlers: Dict[str, Tuple[Type[WireModel], Handler]] = {
            events.REGISTER_NEW_USER: (RegisterUserPayload, self.register_user),
            events.PRE_OFFER: (PreOfferPayload, self.pre_offer),
            events.PRE_OFFER_ANSWER: (PreOfferAnswerPayload, self.pre_offer_answer),
            events.WEBRTC_OFFER: (OfferPayload, self.offer),
            events.WEBRTC_ANSWER: (AnswerPayload, self.answer),
            events.WEBRTC_CANDIDATE: (CandidatePayload, self.candidate),
            events.USER_HANG_UP: (HangUpPayload, self.hang_up),
            events.GROUP_CALL_REGISTER: (GroupCallRegisterPayload, self.create_group_room),
            events.GROUP_CALL_REGISTER_LEGACY: (GroupCallRegisterPayload, self.create_group_room),
            events.GROUP_CALL_JOIN_REQUEST: (GroupCallJoinPayload, self.join_group_room),
            events.GROUP_CALL_USER_LEFT: (GroupCallLeavePayload, self.leave_group_room),
            events.GROUP_CALL_CLOSED_BY_HOST: (GroupCallCloseByHostPayload, self.close_group_room_by_host),
        }

    async def dispatch(self, connection_id: str, event: str, data: Optional[Dict[str, Any]]):
        if event not in self.handlers:
            raise UnknownEventError(event)
        payload_model, handler = self.handlers[event]
        try:
            payload = payload_model.model_validate(data or {})
        except ValidationError as e:
            raise MalformedMessageError(f"Invalid {event} payload: {e.error_count()} errors", event=event) from e
        logger.debug(f"Dispatching {event} from connection {connection_id}")
        await handler(connection_id, payload)

    async def _forward(self, target_id: Optional[str], event: str, payload: Dict[str, Any]):
        if not await self.registry.send(target_id, event, payload):
            logger.debug(f"{event} to {target_id} was not delivered")

    # Presence

    async def register_user(self, connection_id: str, payload: RegisterUserPayload):
        self.presence.register(connection_id, payload.username, payload.peer_id)
        await self.notifier.publish_active_users()
        # Newcomers also need the current room list.
        await self.notifier.publish_group_call_rooms()

    # One-to-one signaling

    async def pre_offer(self, connection_id: str, payload: PreOfferPayload):
        await self._forward(payload.callee.socket_id, events.PRE_OFFER, {
            "callerSocketId": connection_id,
            "callerUserName": payload.caller.username,
        })

    async def pre_offer_answer(self, connection_id: str, payload: PreOfferAnswerPayload):
        await self._forward(payload.caller_socket_id, events.PRE_OFFER_ANSWER, {"answer": payload.answer})

    async def offer(self, connection_id: str, payload: OfferPayload):
        await self._forward(payload.callee_socket_id, events.WEBRTC_OFFER, {"offer": payload.offer})

    async def answer(self, connection_id: str, payload: AnswerPayload):
        await self._forward(payload.caller_socket_id, events.WEBRTC_ANSWER, {"answer": payload.answer})

    async def candidate(self, connection_id: str, payload: CandidatePayload):
        await self._forward(payload.connected_user_socket_id, events.WEBRTC_CANDIDATE, {"candidate": payload.candidate})

    async def hang_up(self, connection_id: str, payload: HangUpPayload):
        await self._forward(payload.connected_user_socket_id, events.USER_HANG_UP, {})

    # Group calls

    async def create_group_room(self, connection_id: str, payload: GroupCallRegisterPayload):
        self.rooms.create_room(connection_id, payload.peer_id, payload.username)
        await self.notifier.publish_group_call_rooms()

    async def join_group_room(self, connection_id: str, payload: GroupCallJoinPayload):
        await self.rooms.join_room(connection_id, payload.room_id, payload.peer_id, payload.stream_id)

    async def leave_group_room(self, connection_id: str, payload: GroupCallLeavePayload):
        await self.rooms.leave_room(connection_id, payload.room_id, payload.stream_id)

    async def close_group_room_by_host(self, connection_id: str, payload: GroupCallCloseByHostPayload):
        self.rooms.close_room_by_host(payload.peer_id)
        await self.notifier.publish_group_call_rooms()
