"""
REPOSITORY PORTS - Data persistence interfaces

Each repository port:
- Is an abstract base class (ABC)
- Defines methods the application needs
- Does NOT specify implementation (Prisma, in-memory, Redis cache, etc.)
"""

from pairchat.domain.ports.repositories.room_directory import RoomDirectory
from pairchat.domain.ports.repositories.message_store import MessageStore

__all__ = [
    "RoomDirectory",
    "MessageStore",
]
