from pairchat.application.services.session import (
    Session,
    SessionContext,
    SessionState,
)
from pairchat.application.services.chat_hub import ChatHub

__all__ = [
    "ChatHub",
    "Session",
    "SessionContext",
    "SessionState",
]
