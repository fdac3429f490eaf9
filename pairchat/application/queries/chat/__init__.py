"""Chat-related queries."""

from pairchat.application.queries.chat.get_chat_history import (
    GetChatHistoryQuery,
    GetChatHistoryHandler,
    GetChatHistoryResult,
)

__all__ = [
    "GetChatHistoryQuery",
    "GetChatHistoryHandler",
    "GetChatHistoryResult",
]
