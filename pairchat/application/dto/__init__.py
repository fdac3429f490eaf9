"""Wire payloads exchanged over the chat connection."""

from pairchat.application.dto.chat import (
    ChatErrorDTO,
    ChatEvent,
    ChatHistoryDTO,
    ChatMessageDTO,
    ChatToClientDTO,
    ChatToServerPayload,
    GetChatHistoryPayload,
    InboundEvent,
    ParticipantDTO,
    RoomDTO,
    RoomHistoryDTO,
)

__all__ = [
    "ChatEvent",
    "InboundEvent",
    "ChatToServerPayload",
    "GetChatHistoryPayload",
    "ParticipantDTO",
    "RoomDTO",
    "ChatMessageDTO",
    "ChatToClientDTO",
    "ChatHistoryDTO",
    "RoomHistoryDTO",
    "ChatErrorDTO",
]
