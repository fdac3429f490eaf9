"""Redis-backed caching for room history."""

from pairchat.infrastructure.cache.cached_message_store import CachedMessageStore
from pairchat.infrastructure.cache.redis_client import (
    close_redis_client,
    create_redis_client,
)

__all__ = [
    "CachedMessageStore",
    "create_redis_client",
    "close_redis_client",
]
