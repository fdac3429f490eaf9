"""
Prisma Message Store Implementation.

Prisma Message Model (prisma/schema.prisma):
    model Message {
        seq          Int      @id @default(autoincrement())
        id           String   @unique @default(uuid())
        room_id      String
        sender_id    String
        recipient_id String?
        body         String
        created_at   DateTime @default(now())
        room         Room     @relation(fields: [room_id], references: [id])
        @@index([room_id, seq])
    }

Mapping:
- Prisma: seq (int, database sequence) <-> Domain: seq
- Prisma: room_id / sender_id / recipient_id (str) <-> RoomId / UserId

seq comes from a PostgreSQL sequence, so it increases with insertion order.
The ChatHub serialises appends per room, which keeps seq order equal to
call order inside a room.
"""

import logging
from typing import TYPE_CHECKING, Optional

from prisma.errors import PrismaError

from pairchat.domain.entities.chat_message import ChatMessage
from pairchat.domain.exceptions import PersistenceError
from pairchat.domain.ports.repositories.message_store import MessageStore
from pairchat.domain.value_objects.message_id import MessageId
from pairchat.domain.value_objects.room_id import RoomId
from pairchat.domain.value_objects.user_id import UserId

if TYPE_CHECKING:
    from prisma import Prisma
    from prisma.models import Message as PrismaMessage

logger = logging.getLogger(__name__)


class PrismaMessageStore(MessageStore):
    """
    Prisma implementation of MessageStore.

    Handles persistence of ChatMessage entities to PostgreSQL via Prisma.
    """

    _prisma: "Prisma"

    def __init__(self, prisma: "Prisma"):
        """
        Initialize store with Prisma client.

        Args:
            prisma: Connected Prisma client (constructed by pairchat.setup.wiring)
        """
        self._prisma = prisma

    def _to_entity(self, record: "PrismaMessage") -> ChatMessage:
        """Map Prisma record to domain entity."""
        return ChatMessage(
            id=MessageId(record.id),
            room_id=RoomId(record.room_id),
            sender=UserId(record.sender_id),
            body=record.body,
            seq=record.seq,
            created_at=record.created_at,
            recipient=UserId(record.recipient_id) if record.recipient_id else None,
        )

    async def append(
        self,
        room_id: RoomId,
        sender: UserId,
        body: str,
        recipient: Optional[UserId] = None,
    ) -> ChatMessage:
        """
        Insert one message and return it with its database-assigned seq.

        Raises:
            PersistenceError: If the insert was not committed
        """
        try:
            record = await self._prisma.message.create(
                data={
                    "room_id": room_id.value,
                    "sender_id": sender.value,
                    "recipient_id": recipient.value if recipient else None,
                    "body": body,
                }
            )
        except PrismaError as e:
            logger.error(f"[MessageStore] append to room {room_id} failed: {e}")
            raise PersistenceError("Message could not be stored") from e
        return self._to_entity(record)

    async def history(self, room_id: RoomId) -> list[ChatMessage]:
        """
        Get every message of a room, oldest first.

        Returns:
            List of ChatMessage entities ascending by seq; empty if none
        """
        try:
            records = await self._prisma.message.find_many(
                where={"room_id": room_id.value},
                order={"seq": "asc"},
            )
        except PrismaError as e:
            logger.error(f"[MessageStore] history of room {room_id} failed: {e}")
            raise PersistenceError("History could not be read") from e
        return [self._to_entity(record) for record in records]
