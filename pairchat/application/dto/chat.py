"""Chat DTOs for the WebSocket protocol.

Every frame is a JSON object {"event": <name>, "data": <payload>}.
Field names match what existing clients of the chat gateway expect
(roomId, senderId, receiverId, message).
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from pairchat.domain.entities.chat_message import ChatMessage
from pairchat.domain.entities.room import Room


class ChatEvent:
    """Event names (avoid hardcoding strings throughout codebase)."""

    # client -> server
    JOIN_ROOM = "joinRoom"
    CHAT_TO_SERVER = "chatToServer"
    GET_CHAT_HISTORY = "getChatHistory"

    # server -> client
    JOINED_ROOM = "joinedRoom"
    CHAT_HISTORY = "chatHistory"
    CHAT_TO_CLIENT = "chatToClient"
    CHAT_ERROR = "chatError"


# ==================== INBOUND ====================


class InboundEvent(BaseModel):
    event: str
    data: Any = None


class ChatToServerPayload(BaseModel):
    room: str
    message: str


class GetChatHistoryPayload(BaseModel):
    room: str


# ==================== OUTBOUND ====================


class ParticipantDTO(BaseModel):
    userId: str


class RoomDTO(BaseModel):
    """Room descriptor sent with joinedRoom."""

    roomId: str
    participants: list[ParticipantDTO]

    @classmethod
    def from_entity(cls, room: Room) -> "RoomDTO":
        return cls(
            roomId=room.id.value,
            participants=[ParticipantDTO(userId=user.value) for user in room.participants],
        )


class ChatMessageDTO(BaseModel):
    """One stored message as it appears in history."""

    id: str
    roomId: str
    senderId: str
    receiverId: Optional[str] = None
    message: str
    seq: int
    createdAt: datetime

    @classmethod
    def from_entity(cls, message: ChatMessage) -> "ChatMessageDTO":
        return cls(
            id=message.id.value,
            roomId=message.room_id.value,
            senderId=message.sender.value,
            receiverId=message.recipient.value if message.recipient else None,
            message=message.body,
            seq=message.seq,
            createdAt=message.created_at,
        )


class ChatToClientDTO(BaseModel):
    room: str
    message: str
    sender: str


class ChatHistoryDTO(BaseModel):
    """History pushed to every subscriber after a join."""

    history: list[ChatMessageDTO] = Field(default_factory=list)


class RoomHistoryDTO(BaseModel):
    """History returned to the requester of getChatHistory."""

    room: str
    history: list[ChatMessageDTO] = Field(default_factory=list)


class ChatErrorDTO(BaseModel):
    event: str
    detail: str
