"""
Session - one live connection as seen by the ChatHub.

State machine:
    CONNECTING -> AUTHENTICATED -> DISCONNECTED
    CONNECTING -> DISCONNECTED           (authentication failed)

The identity lives in an immutable SessionContext created at the moment
authentication succeeds; the transport object itself is never tagged.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from pairchat.domain.ports.connection import Connection
from pairchat.domain.value_objects.user_id import UserId


class SessionState(str, Enum):
    CONNECTING = "connecting"
    AUTHENTICATED = "authenticated"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class SessionContext:
    session_id: str
    identity: UserId
    connected_at: datetime


@dataclass(eq=False)
class Session:
    connection: Connection
    id: str = field(default_factory=lambda: uuid4().hex)
    state: SessionState = SessionState.CONNECTING
    context: Optional[SessionContext] = None
    rooms: set[str] = field(default_factory=set)

    @property
    def identity(self) -> Optional[UserId]:
        return self.context.identity if self.context else None

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    def authenticate(self, identity: UserId) -> SessionContext:
        if self.state is not SessionState.CONNECTING:
            raise RuntimeError(f"Cannot authenticate a session in state {self.state.value}")
        self.context = SessionContext(
            session_id=self.id,
            identity=identity,
            connected_at=datetime.now(timezone.utc),
        )
        self.state = SessionState.AUTHENTICATED
        return self.context
