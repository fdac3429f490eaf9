"""
Async Redis Client Factory.

Creates the Redis client used by CachedMessageStore.
Uses redis.asyncio so cache calls never block the event loop.
"""

import logging
import redis.asyncio as redis
from redis.asyncio import Redis

logger = logging.getLogger(__name__)


async def create_redis_client(url: str) -> Redis:
    """
    Create async Redis client with connection pool.

    Returns:
        Redis: Connected async Redis client

    Raises:
        redis.ConnectionError: If Redis is not reachable

    Note:
        - Uses connection pooling (automatic with from_url)
        - decode_responses=True for automatic string decoding
        - Tests connection with ping() before returning
    """
    client = redis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
    )

    await client.ping()
    logger.info(f"[Redis] Connected to {url}")

    return client


async def close_redis_client(client: Redis) -> None:
    """Close Redis client connection. Called on application shutdown."""
    if client:
        await client.aclose()
        logger.info("[Redis] Connection closed")
