"""
In-memory adapters (STORAGE_BACKEND=memory).

Durable for the life of the process only; intended for development,
single-worker deployments and tests.
"""

from pairchat.infrastructure.memory.in_memory_room_directory import (
    InMemoryRoomDirectory,
)
from pairchat.infrastructure.memory.in_memory_message_store import (
    InMemoryMessageStore,
)

__all__ = [
    "InMemoryRoomDirectory",
    "InMemoryMessageStore",
]
