"""
Persistence Layer - Database implementations.

Contains Prisma implementations for domain ports. They take any connected
client; constructing `prisma.Prisma` needs a generated client (`prisma generate`).
"""

from pairchat.infrastructure.persistence.prisma_room_directory import (
    PrismaRoomDirectory,
)
from pairchat.infrastructure.persistence.prisma_message_store import (
    PrismaMessageStore,
)

__all__ = [
    "PrismaRoomDirectory",
    "PrismaMessageStore",
]
