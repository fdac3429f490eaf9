"""
Service wiring.

Builds the SessionAuthenticator, RoomDirectory, MessageStore and ChatHub as
plain objects, once, from a config class. The FastAPI lifespan owns the
resulting ChatServices and closes it on shutdown.

Backends:
    STORAGE_BACKEND=memory  -> InMemoryRoomDirectory + InMemoryMessageStore
    STORAGE_BACKEND=prisma  -> PrismaRoomDirectory + PrismaMessageStore
    REDIS_CACHE_ENABLED     -> wraps the message store in CachedMessageStore
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from redis.asyncio import Redis

from pairchat.application.services.chat_hub import ChatHub
from pairchat.config.settings import Config
from pairchat.domain.ports.repositories import MessageStore, RoomDirectory
from pairchat.domain.ports.session_authenticator import SessionAuthenticator
from pairchat.infrastructure.auth import JwtSessionAuthenticator
from pairchat.infrastructure.cache import (
    CachedMessageStore,
    close_redis_client,
    create_redis_client,
)
from pairchat.infrastructure.memory import InMemoryMessageStore, InMemoryRoomDirectory

logger = logging.getLogger(__name__)


@dataclass
class ChatServices:
    authenticator: SessionAuthenticator
    room_directory: RoomDirectory
    message_store: MessageStore
    hub: ChatHub
    prisma: Optional[Any] = None
    redis: Optional[Redis] = None

    async def close(self) -> None:
        await self.hub.close()
        await self.message_store.close()
        if self.redis is not None:
            await close_redis_client(self.redis)
        if self.prisma is not None:
            await self.prisma.disconnect()
            logger.info("[Wiring] Prisma disconnected")


def create_authenticator(config=Config) -> JwtSessionAuthenticator:
    return JwtSessionAuthenticator(
        secret=config.SERVICE_AUTH_SECRET,
        algorithms=config.SERVICE_AUTH_ALGORITHMS,
        issuer=config.SERVICE_AUTH_ISSUER,
        audience=config.SERVICE_AUTH_AUDIENCE,
        identity_claim=config.SERVICE_AUTH_IDENTITY_CLAIM,
    )


def create_hub(
    config,
    authenticator: SessionAuthenticator,
    room_directory: RoomDirectory,
    message_store: MessageStore,
) -> ChatHub:
    return ChatHub(
        authenticator=authenticator,
        room_directory=room_directory,
        message_store=message_store,
        store_timeout=config.STORE_TIMEOUT_SECONDS,
        send_timeout=config.SEND_TIMEOUT_SECONDS,
        max_message_length=config.MAX_MESSAGE_LENGTH,
    )


async def create_services(config=Config) -> ChatServices:
    """
    Construct and connect every service. Call ONCE at app startup.

    Raises:
        ValueError: Unknown STORAGE_BACKEND or missing auth secret
    """
    authenticator = create_authenticator(config)

    prisma = None
    backend = config.STORAGE_BACKEND.lower()
    if backend == "prisma":
        # Generated client is only required when this backend is selected
        from prisma import Prisma
        from pairchat.infrastructure.persistence import (
            PrismaMessageStore,
            PrismaRoomDirectory,
        )

        prisma = (
            Prisma(datasource={"url": config.DATABASE_URL})
            if config.DATABASE_URL
            else Prisma()
        )
        await prisma.connect()
        room_directory: RoomDirectory = PrismaRoomDirectory(prisma)
        message_store: MessageStore = PrismaMessageStore(prisma)
    elif backend == "memory":
        room_directory = InMemoryRoomDirectory()
        message_store = InMemoryMessageStore()
    else:
        raise ValueError(f"Unknown STORAGE_BACKEND: {config.STORAGE_BACKEND!r}")

    redis_client = None
    if config.REDIS_CACHE_ENABLED:
        redis_client = await create_redis_client(config.REDIS_URL)
        message_store = CachedMessageStore(
            message_store, redis_client, ttl_seconds=config.REDIS_CACHE_TTL
        )

    hub = create_hub(config, authenticator, room_directory, message_store)
    logger.info(
        f"[Wiring] Chat services ready (storage={backend}, "
        f"redis_cache={'on' if redis_client else 'off'})"
    )
    return ChatServices(
        authenticator=authenticator,
        room_directory=room_directory,
        message_store=message_store,
        hub=hub,
        prisma=prisma,
        redis=redis_client,
    )
