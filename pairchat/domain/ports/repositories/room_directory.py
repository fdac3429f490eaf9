"""
RoomDirectory Port - Maps an unordered participant pair to its single room.
Implementations:
- pairchat/infrastructure/persistence/prisma_room_directory.py
- pairchat/infrastructure/memory/in_memory_room_directory.py

find_or_create_room must be race-free: concurrent first contact for the
same pair yields exactly one room.
"""

from abc import ABC, abstractmethod
from typing import Optional

from pairchat.domain.entities.room import Room
from pairchat.domain.value_objects.room_id import RoomId
from pairchat.domain.value_objects.user_id import UserId


class RoomDirectory(ABC):
    @abstractmethod
    async def find_or_create_room(self, user_a: UserId, user_b: UserId) -> Room: ...

    @abstractmethod
    async def find_room_for_participant(
        self, user_id: UserId, room_id: RoomId
    ) -> Optional[Room]: ...
