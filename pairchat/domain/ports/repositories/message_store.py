"""
MessageStore Port - Durable, per-room ordered message log.
Implementations:
- pairchat/infrastructure/persistence/prisma_message_store.py
- pairchat/infrastructure/memory/in_memory_message_store.py
- pairchat/infrastructure/cache/cached_message_store.py (decorator)

append returns only once the write is durable; history is ascending by seq.
"""

from abc import ABC, abstractmethod
from typing import Optional

from pairchat.domain.entities.chat_message import ChatMessage
from pairchat.domain.value_objects.room_id import RoomId
from pairchat.domain.value_objects.user_id import UserId


class MessageStore(ABC):
    @abstractmethod
    async def append(
        self,
        room_id: RoomId,
        sender: UserId,
        body: str,
        recipient: Optional[UserId] = None,
    ) -> ChatMessage: ...

    @abstractmethod
    async def history(self, room_id: RoomId) -> list[ChatMessage]: ...

    async def close(self) -> None:
        """Release resources held by the store."""
