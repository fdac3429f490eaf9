"""
RoomId Value Object - UUID wrapper for room identity.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RoomId:
    value: str  # room_id, presented as UUID string

    def __post_init__(self):
        if not self.value:
            raise ValueError("Room ID cannot be empty")
        UUID(self.value)  # raises ValueError if invalid UUID

    def __str__(self) -> str:
        return self.value
