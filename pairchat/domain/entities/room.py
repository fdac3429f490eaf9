"""
Room Entity - The durable record pairing exactly two participants.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import uuid4

from pairchat.domain.value_objects.participant_pair import ParticipantPair
from pairchat.domain.value_objects.room_id import RoomId
from pairchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class Room:
    id: RoomId
    participants: ParticipantPair
    created_at: datetime

    @classmethod
    def create(cls, participants: ParticipantPair) -> Room:
        """Factory method to create a new Room with a generated ID and timestamp."""
        return cls(
            id=RoomId(str(uuid4())),
            participants=participants,
            created_at=datetime.now(timezone.utc),
        )

    def has_participant(self, user_id: UserId) -> bool:
        return self.participants.contains(user_id)
