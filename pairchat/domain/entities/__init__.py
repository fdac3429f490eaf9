"""
ENTITIES - Business objects with identity

Each entity:
- Has a unique identifier
- Pure Python dataclasses (no ORM, no Pydantic)
"""

from pairchat.domain.entities.room import Room
from pairchat.domain.entities.chat_message import ChatMessage

__all__ = [
    "Room",
    "ChatMessage",
]
