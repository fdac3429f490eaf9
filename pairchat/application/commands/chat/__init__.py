"""Chat commands."""

from .join_room import JoinRoomCommand, JoinRoomHandler
from .send_message import SendMessageCommand, SendMessageHandler

__all__ = [
    "JoinRoomCommand",
    "JoinRoomHandler",
    "SendMessageCommand",
    "SendMessageHandler",
]
