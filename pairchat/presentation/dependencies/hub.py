from fastapi import WebSocket

from pairchat.application.services.chat_hub import ChatHub


def get_chat_hub(websocket: WebSocket) -> ChatHub:
    """The hub wired at startup (see pairchat.setup.wiring)."""
    return websocket.app.state.services.hub
