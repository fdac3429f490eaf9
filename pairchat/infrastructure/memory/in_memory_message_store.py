import asyncio
from collections import defaultdict
from typing import Optional

from pairchat.domain.entities.chat_message import ChatMessage
from pairchat.domain.ports.repositories.message_store import MessageStore
from pairchat.domain.value_objects.room_id import RoomId
from pairchat.domain.value_objects.user_id import UserId


class InMemoryMessageStore(MessageStore):
    """Per-room append-only lists; seq starts at 1 in every room."""

    def __init__(self):
        self._logs: dict[str, list[ChatMessage]] = defaultdict(list)
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, room_id: RoomId) -> asyncio.Lock:
        return self._locks.setdefault(room_id.value, asyncio.Lock())

    async def append(
        self,
        room_id: RoomId,
        sender: UserId,
        body: str,
        recipient: Optional[UserId] = None,
    ) -> ChatMessage:
        async with self._lock_for(room_id):
            log = self._logs[room_id.value]
            message = ChatMessage.create(
                room_id=room_id,
                sender=sender,
                body=body,
                seq=len(log) + 1,
                recipient=recipient,
            )
            log.append(message)
            return message

    async def history(self, room_id: RoomId) -> list[ChatMessage]:
        # Copy, so callers never observe later appends through the result
        return list(self._logs.get(room_id.value, ()))
