"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Has no identity (compared by value, not by ID)
- Is immutable (frozen dataclass)
- Validates itself on creation
- Pure Python (no framework dependencies)
"""

from pairchat.domain.value_objects.user_id import UserId
from pairchat.domain.value_objects.room_id import RoomId
from pairchat.domain.value_objects.message_id import MessageId
from pairchat.domain.value_objects.participant_pair import ParticipantPair
from pairchat.domain.value_objects.auth_result import (
    AuthFailure,
    AuthResult,
    Authenticated,
)

__all__ = [
    "UserId",
    "RoomId",
    "MessageId",
    "ParticipantPair",
    "Authenticated",
    "AuthFailure",
    "AuthResult",
]
