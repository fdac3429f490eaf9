import asyncio
import logging
from typing import Optional

from pairchat.domain.entities.room import Room
from pairchat.domain.ports.repositories.room_directory import RoomDirectory
from pairchat.domain.value_objects.participant_pair import ParticipantPair
from pairchat.domain.value_objects.room_id import RoomId
from pairchat.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


class InMemoryRoomDirectory(RoomDirectory):
    """
    Rooms held in process memory.

    All creation goes through one lock, so the lookup and the insert for a
    pair can never interleave with another caller's.
    """

    def __init__(self):
        self._rooms_by_pair: dict[str, Room] = {}
        self._rooms_by_id: dict[str, Room] = {}
        self._lock = asyncio.Lock()

    async def find_or_create_room(self, user_a: UserId, user_b: UserId) -> Room:
        pair = ParticipantPair.of(user_a, user_b)
        async with self._lock:
            existing = self._rooms_by_pair.get(pair.key)
            if existing:
                return existing

            room = Room.create(pair)
            self._rooms_by_pair[pair.key] = room
            self._rooms_by_id[room.id.value] = room
            logger.info(f"[RoomDirectory] Created room {room.id}")
            return room

    async def find_room_for_participant(
        self, user_id: UserId, room_id: RoomId
    ) -> Optional[Room]:
        room = self._rooms_by_id.get(room_id.value)
        if room and room.has_participant(user_id):
            return room
        return None
