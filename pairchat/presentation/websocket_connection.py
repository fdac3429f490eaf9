"""
WebSocketConnection - Connection port over a Starlette/FastAPI WebSocket.

Frames every event as JSON {"event": <name>, "data": <payload>}. Writes are
serialised with a lock because several rooms may fan out to the same socket
concurrently.
"""

import asyncio
import logging
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from pairchat.domain.ports.connection import (
    CLOSE_NORMAL,
    Connection,
    ConnectionClosed,
)

logger = logging.getLogger(__name__)


class WebSocketConnection(Connection):
    def __init__(self, websocket: WebSocket):
        self._websocket = websocket
        self._write_lock = asyncio.Lock()
        self._closed = False

    @property
    def remote(self) -> str:
        client = self._websocket.client
        return f"{client.host}:{client.port}" if client else "unknown"

    async def send(self, event: str, payload: Any) -> None:
        async with self._write_lock:
            if self._closed:
                raise ConnectionClosed("connection already closed")
            try:
                await self._websocket.send_json({"event": event, "data": payload})
            except (WebSocketDisconnect, RuntimeError, OSError) as e:
                self._closed = True
                raise ConnectionClosed(str(e)) from e

    async def close(self, code: int = CLOSE_NORMAL) -> None:
        if self._closed:
            return
        self._closed = True
        if (
            self._websocket.application_state == WebSocketState.DISCONNECTED
            or self._websocket.client_state == WebSocketState.DISCONNECTED
        ):
            return
        try:
            await self._websocket.close(code=code)
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            # Peer vanished between the state check and the close frame
            logger.debug(f"[WebSocket] close({code}) after peer left: {e!r}")
