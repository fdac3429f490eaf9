"""
API Routers - FastAPI endpoint definitions.
"""

from pairchat.presentation.api.chat_ws import router as chat_ws_router
from pairchat.presentation.api.metrics import router as metrics_router

__all__ = [
    "chat_ws_router",
    "metrics_router",
]
