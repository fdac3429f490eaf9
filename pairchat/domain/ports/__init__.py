"""
PORTS - Interfaces that infrastructure and transport implement

- repositories/room_directory.py  -> RoomDirectory (rooms keyed by participant pair)
- repositories/message_store.py   -> MessageStore (per-room ordered message log)
- session_authenticator.py        -> SessionAuthenticator (bearer credential check)
- connection.py                   -> Connection (a live client transport)
"""

from pairchat.domain.ports.connection import Connection, ConnectionClosed
from pairchat.domain.ports.session_authenticator import SessionAuthenticator

__all__ = [
    "Connection",
    "ConnectionClosed",
    "SessionAuthenticator",
]
