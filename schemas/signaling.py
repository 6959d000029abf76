from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    # Wire names are camelCase; unknown client fields are ignored.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class Envelope(WireModel):
    event: str
    data: Optional[Dict[str, Any]] = None


# Directory entries

class PresenceEntry(WireModel):
    username: str
    peer_id: Optional[str] = Field(None, alias="peerId")
    socket_id: str = Field(..., alias="socketId")


class Room(WireModel):
    room_id: str = Field(..., alias="roomId")
    peer_id: Optional[str] = Field(None, alias="peerId")
    host_name: Optional[str] = Field(None, alias="hostName")
    socket_id: str = Field(..., alias="socketId")


# Inbound payloads

class RegisterUserPayload(WireModel):
    username: str
    peer_id: Optional[str] = Field(None, alias="peerId")


class CallParty(WireModel):
    socket_id: Optional[str] = Field(None, alias="socketId")
    username: Optional[str] = None


class PreOfferPayload(WireModel):
    callee: CallParty
    caller: CallParty


class PreOfferAnswerPayload(WireModel):
    caller_socket_id: str = Field(..., alias="callerSocketId")
    answer: Any


class OfferPayload(WireModel):
    callee_socket_id: str = Field(..., alias="calleeSocketId")
    offer: Any


class AnswerPayload(WireModel):
    caller_socket_id: str = Field(..., alias="callerSocketId")
    answer: Any


class CandidatePayload(WireModel):
    connected_user_socket_id: str = Field(..., alias="connectedUserSocketId")
    candidate: Any


class HangUpPayload(WireModel):
    connected_user_socket_id: str = Field(..., alias="connectedUserSocketId")


class GroupCallRegisterPayload(WireModel):
    peer_id: str = Field(..., alias="peerId")
    username: Optional[str] = None


class GroupCallJoinPayload(WireModel):
    room_id: str = Field(..., alias="roomId")
    peer_id: str = Field(..., alias="peerId")
    stream_id: Optional[str] = Field(None, alias="streamId")


class GroupCallLeavePayload(WireModel):
    room_id: str = Field(..., alias="roomId")
    stream_id: Optional[str] = Field(None, alias="streamId")


class GroupCallCloseByHostPayload(WireModel):
    peer_id: str = Field(..., alias="peerId")
