"""
Cached Message Store - Decorator pattern for Redis caching.

Architecture:
    CachedMessageStore (decorator)
        ↓ wraps
    PrismaMessageStore (concrete implementation)
        ↓ implements
    MessageStore (abstract interface)

Cache Strategy:
- Read-Through: Check cache first, fallback to the store, populate cache
- Write-Through invalidation: append to the store first, then drop the key
- TTL-based expiration as a backstop

Redis Data Structure (STRING):
- Key pattern: "room:{room_id}:history"
- Value: JSON array of messages, oldest first
- TTL: REDIS_CACHE_TTL (default 3600 seconds)

Error Handling:
- Cache failures never fail the operation
- Log warnings and fall back to the wrapped store

Note:
    Invalidation happens after the durable append. A history read that
    misses the cache concurrently with an append can repopulate the key with
    the pre-append list; the ChatHub holds the room lock around both
    operations, so within one process that interleaving cannot occur.
"""

import json
import logging
from datetime import datetime
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from pairchat.domain.entities.chat_message import ChatMessage
from pairchat.domain.ports.repositories.message_store import MessageStore
from pairchat.domain.value_objects.message_id import MessageId
from pairchat.domain.value_objects.room_id import RoomId
from pairchat.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


class CachedMessageStore(MessageStore):
    """
    Decorator: adds Redis caching to MessageStore.

    Implements the same interface, so callers don't know caching exists.
    """

    def __init__(self, store: MessageStore, redis: Redis, ttl_seconds: int = 3600):
        """
        Args:
            store: Underlying MessageStore implementation (e.g., PrismaMessageStore)
            redis: Async Redis client for caching
            ttl_seconds: Expiry of a cached history
        """
        self._store = store
        self._redis = redis
        self._ttl = ttl_seconds

    def _cache_key(self, room_id: RoomId) -> str:
        return f"room:{room_id.value}:history"

    def _serialize_messages(self, messages: list[ChatMessage]) -> str:
        return json.dumps(
            [
                {
                    "id": message.id.value,
                    "room_id": message.room_id.value,
                    "sender": message.sender.value,
                    "recipient": message.recipient.value if message.recipient else None,
                    "body": message.body,
                    "seq": message.seq,
                    "created_at": message.created_at.isoformat(),
                }
                for message in messages
            ]
        )

    def _deserialize_messages(self, json_str: str) -> list[ChatMessage]:
        return [
            ChatMessage(
                id=MessageId(item["id"]),
                room_id=RoomId(item["room_id"]),
                sender=UserId(item["sender"]),
                recipient=UserId(item["recipient"]) if item.get("recipient") else None,
                body=item["body"],
                seq=item["seq"],
                created_at=datetime.fromisoformat(item["created_at"]),
            )
            for item in json.loads(json_str)
        ]

    async def append(
        self,
        room_id: RoomId,
        sender: UserId,
        body: str,
        recipient: Optional[UserId] = None,
    ) -> ChatMessage:
        # Source of truth first; a failed append leaves the cache untouched
        message = await self._store.append(room_id, sender, body, recipient)
        try:
            await self._redis.delete(self._cache_key(room_id))
        except RedisError as e:
            logger.warning(f"[Cache] Failed to invalidate room {room_id}: {e}")
        return message

    async def history(self, room_id: RoomId) -> list[ChatMessage]:
        key = self._cache_key(room_id)
        try:
            cached = await self._redis.get(key)
            if cached is not None:
                logger.debug(f"[Cache] HIT room {room_id}")
                return self._deserialize_messages(cached)
        except (RedisError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"[Cache] Read failed for room {room_id}: {e}")

        messages = await self._store.history(room_id)

        try:
            await self._redis.setex(key, self._ttl, self._serialize_messages(messages))
        except RedisError as e:
            logger.warning(f"[Cache] Populate failed for room {room_id}: {e}")

        return messages

    async def close(self) -> None:
        await self._store.close()
