"""
ChatMessage Entity - A single message appended to a room's log.

Messages are immutable once persisted. `seq` is assigned by the MessageStore
and is the ordering key for history.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pairchat.domain.value_objects.message_id import MessageId
from pairchat.domain.value_objects.room_id import RoomId
from pairchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class ChatMessage:
    id: MessageId
    room_id: RoomId
    sender: UserId
    body: str
    seq: int
    created_at: datetime
    recipient: Optional[UserId] = None

    @classmethod
    def create(
        cls,
        room_id: RoomId,
        sender: UserId,
        body: str,
        seq: int,
        recipient: Optional[UserId] = None,
    ) -> ChatMessage:
        """Factory method used by stores that assign seq themselves."""
        return cls(
            id=MessageId(str(uuid4())),
            room_id=room_id,
            sender=sender,
            body=body,
            seq=seq,
            created_at=datetime.now(timezone.utc),
            recipient=recipient,
        )
