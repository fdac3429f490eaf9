"""
Chat WebSocket Router.

Thin layer: authenticates the handshake through the ChatHub, then reads
frames and hands each {"event", "data"} to ChatHub.dispatch().

Client sends JSON frames:
```json
{ "event": "joinRoom", "data": "<peer user id>" }
{ "event": "chatToServer", "data": { "room": "<room id>", "message": "hi" } }
{ "event": "getChatHistory", "data": { "room": "<room id>" } }
```

A rejected handshake is closed with 1008 and receives no event. A frame
that is not a JSON object with a string "event" closes with 1002.
"""

import logging

from fastapi import APIRouter, Depends, WebSocket
from pydantic import ValidationError

from pairchat.application.dto.chat import InboundEvent
from pairchat.application.services.chat_hub import ChatHub
from pairchat.config.logging_config import correlation_id_var
from pairchat.domain.ports.connection import (
    CLOSE_INTERNAL_ERROR,
    CLOSE_PROTOCOL_ERROR,
)
from pairchat.observability.metrics import MetricsErrorType, increment_error
from pairchat.presentation.dependencies.auth import extract_credential
from pairchat.presentation.dependencies.hub import get_chat_hub
from pairchat.presentation.websocket_connection import WebSocketConnection

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


@router.websocket("/ws")
async def chat_ws_endpoint(websocket: WebSocket, hub: ChatHub = Depends(get_chat_hub)):
    connection = WebSocketConnection(websocket)
    session = await hub.connect(connection, extract_credential(websocket))
    if session is None:
        return

    correlation_id_var.set(session.id)
    await websocket.accept()

    try:
        while session.is_authenticated:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

            raw = message.get("text") or message.get("bytes")
            try:
                if raw is None:
                    raise ValueError("empty frame")
                frame = InboundEvent.model_validate_json(raw)
            except (ValidationError, ValueError):
                increment_error(MetricsErrorType.PROTOCOL_ERROR)
                logger.warning(f"[ChatWS] Malformed frame from session {session.id}")
                await hub.disconnect(session, code=CLOSE_PROTOCOL_ERROR)
                return

            await hub.dispatch(session, frame.event, frame.data)
    except Exception:
        logger.exception(f"[ChatWS] Session {session.id} failed")
        await hub.disconnect(session, code=CLOSE_INTERNAL_ERROR)
        raise
    finally:
        await hub.disconnect(session)
