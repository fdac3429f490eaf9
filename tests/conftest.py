import time
from typing import Any

import jwt
import pytest
from fastapi.testclient import TestClient

from pairchat.application.services.chat_hub import ChatHub
from pairchat.config.settings import TestingConfig
from pairchat.domain.ports.connection import Connection, ConnectionClosed
from pairchat.fastapi_app import create_fastapi_app
from pairchat.infrastructure.auth import JwtSessionAuthenticator
from pairchat.infrastructure.memory import InMemoryMessageStore, InMemoryRoomDirectory

SERVICE_AUTH_SECRET = "test-secret"


class ChatTestConfig(TestingConfig):
    SERVICE_AUTH_SECRET = SERVICE_AUTH_SECRET
    SERVICE_AUTH_ISSUER = ""
    SERVICE_AUTH_AUDIENCE = ""
    STORE_TIMEOUT_SECONDS = 2.0
    SEND_TIMEOUT_SECONDS = 2.0


def make_token(user_id="u1", expires_in=300, secret=SERVICE_AUTH_SECRET, **claims):
    now = int(time.time())
    payload = {"iat": now, "exp": now + expires_in, **claims}
    if user_id is not None:
        payload["userId"] = user_id
    return jwt.encode(payload, secret, algorithm="HS256")


class RecordingConnection(Connection):
    """Connection double that keeps every event it was sent."""

    def __init__(self, name="test"):
        self.name = name
        self.events: list[tuple[str, Any]] = []
        self.close_codes: list[int] = []
        self.broken = False

    @property
    def remote(self) -> str:
        return self.name

    @property
    def closed(self) -> bool:
        return bool(self.close_codes)

    @property
    def close_code(self):
        return self.close_codes[0] if self.close_codes else None

    async def send(self, event, payload):
        if self.broken or self.closed:
            raise ConnectionClosed(f"{self.name} is gone")
        self.events.append((event, payload))

    async def close(self, code=1000):
        self.close_codes.append(code)

    def payloads(self, event):
        return [payload for name, payload in self.events if name == event]

    def names(self):
        return [name for name, _ in self.events]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def authenticator():
    return JwtSessionAuthenticator(secret=SERVICE_AUTH_SECRET)


@pytest.fixture
def room_directory():
    return InMemoryRoomDirectory()


@pytest.fixture
def message_store():
    return InMemoryMessageStore()


@pytest.fixture
def hub(authenticator, room_directory, message_store):
    return ChatHub(
        authenticator=authenticator,
        room_directory=room_directory,
        message_store=message_store,
        store_timeout=1.0,
        send_timeout=1.0,
    )


@pytest.fixture
def connect(hub):
    """Open an authenticated session for a user id."""

    async def _connect(user_id):
        connection = RecordingConnection(user_id)
        session = await hub.connect(connection, make_token(user_id))
        assert session is not None
        return session, connection

    return _connect


@pytest.fixture()
def app():
    """Create and configure a new FastAPI app instance for each test."""
    return create_fastapi_app(config=ChatTestConfig)


@pytest.fixture()
def client(app):
    """A test client for the FastAPI app, with lifespan running."""
    with TestClient(app) as test_client:
        yield test_client
