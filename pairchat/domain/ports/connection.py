"""
Connection Port - The transport handle of one live client.

Implementation: pairchat/presentation/websocket_connection.py
"""

from abc import ABC, abstractmethod
from typing import Any

# RFC 6455 close codes used by the hub
CLOSE_NORMAL = 1000
CLOSE_GOING_AWAY = 1001
CLOSE_PROTOCOL_ERROR = 1002
CLOSE_POLICY_VIOLATION = 1008
CLOSE_INTERNAL_ERROR = 1011


class Connection(ABC):
    @property
    @abstractmethod
    def remote(self) -> str:
        """Printable peer address, for logs."""

    @abstractmethod
    async def send(self, event: str, payload: Any) -> None:
        """Deliver one named event. Raises ConnectionClosed if the peer is gone."""

    @abstractmethod
    async def close(self, code: int = CLOSE_NORMAL) -> None:
        """Close the transport. Safe to call more than once."""


class ConnectionClosed(Exception):
    """Raised by Connection.send when the peer is gone."""
