"""Observability package for the chat service."""

from pairchat.observability.metrics import (
    session_opened,
    session_closed,
    increment_messages,
    increment_room_joins,
    observe_store_latency,
    increment_error,
    get_metrics_content,
    MetricsErrorType,
)

__all__ = [
    "session_opened",
    "session_closed",
    "increment_messages",
    "increment_room_joins",
    "observe_store_latency",
    "increment_error",
    "get_metrics_content",
    "MetricsErrorType",
]
