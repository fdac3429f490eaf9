"""
Prisma Room Directory Implementation.

Prisma Room Model (prisma/schema.prisma):
    model Room {
        id            String   @id @default(uuid())
        pair_key      String   @unique
        participant_a String
        participant_b String
        created_at    DateTime @default(now())
    }

participant_a/participant_b hold the pair in sorted order. The UNIQUE
constraint on pair_key is what makes first contact race-free: when two
callers both miss and both insert, the database rejects the second insert
and that caller reads back the winner's row.
"""

import logging
from typing import TYPE_CHECKING, Optional

from prisma.errors import PrismaError, UniqueViolationError

from pairchat.domain.entities.room import Room
from pairchat.domain.exceptions import PersistenceError
from pairchat.domain.ports.repositories.room_directory import RoomDirectory
from pairchat.domain.value_objects.participant_pair import ParticipantPair
from pairchat.domain.value_objects.room_id import RoomId
from pairchat.domain.value_objects.user_id import UserId

if TYPE_CHECKING:
    from prisma import Prisma
    from prisma.models import Room as PrismaRoom

logger = logging.getLogger(__name__)


class PrismaRoomDirectory(RoomDirectory):
    _prisma: "Prisma"

    def __init__(self, prisma: "Prisma"):
        self._prisma = prisma

    def _to_entity(self, record: "PrismaRoom") -> Room:
        """Map Prisma record to domain entity."""
        return Room(
            id=RoomId(record.id),
            participants=ParticipantPair.of(
                UserId(record.participant_a), UserId(record.participant_b)
            ),
            created_at=record.created_at,
        )

    async def find_or_create_room(self, user_a: UserId, user_b: UserId) -> Room:
        pair = ParticipantPair.of(user_a, user_b)
        try:
            record = await self._prisma.room.find_unique(where={"pair_key": pair.key})
            if record:
                return self._to_entity(record)

            room = Room.create(pair)
            try:
                record = await self._prisma.room.create(
                    data={
                        "id": room.id.value,
                        "pair_key": pair.key,
                        "participant_a": pair.first.value,
                        "participant_b": pair.second.value,
                        "created_at": room.created_at,
                    }
                )
                logger.info(f"[RoomDirectory] Created room {room.id}")
            except UniqueViolationError:
                # Lost the race for this pair; the winner's row is authoritative
                record = await self._prisma.room.find_unique(
                    where={"pair_key": pair.key}
                )
                if record is None:
                    raise PersistenceError("Room vanished after unique violation")
            return self._to_entity(record)
        except PrismaError as e:
            logger.error(f"[RoomDirectory] find_or_create_room failed: {e}")
            raise PersistenceError("Room lookup failed") from e

    async def find_room_for_participant(
        self, user_id: UserId, room_id: RoomId
    ) -> Optional[Room]:
        try:
            record = await self._prisma.room.find_first(
                where={
                    "id": room_id.value,
                    "OR": [
                        {"participant_a": user_id.value},
                        {"participant_b": user_id.value},
                    ],
                }
            )
        except PrismaError as e:
            logger.error(f"[RoomDirectory] find_room_for_participant failed: {e}")
            raise PersistenceError("Room lookup failed") from e
        return self._to_entity(record) if record else None
