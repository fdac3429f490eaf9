"""
FastAPI Application Factory.
Creates and configures the FastAPI application with the chat WebSocket,
health and metrics routes, and the explicitly wired chat services.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from pairchat import __version__
from pairchat.config.logging_config import setup_logging
from pairchat.config.settings import get_config
from pairchat.presentation.api import chat_ws_router, metrics_router
from pairchat.setup.wiring import ChatServices, create_services

_config = get_config()
setup_logging(_config.LOG_LEVEL, _config.LOG_PATH)
logger = logging.getLogger(__name__)


def create_fastapi_app(
    services: Optional[ChatServices] = None, config=None
) -> FastAPI:
    """
    Application factory for creating FastAPI app.

    Args:
        services: Pre-built services (tests). When omitted they are created
            from config at startup and closed at shutdown.
        config: Config class; defaults to get_config() (APP_ENV)

    Returns:
        FastAPI application instance
    """
    config = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = getattr(app.state, "services", None) is None
        if owned:
            app.state.services = await create_services(config)
        logger.info("FastAPI application started. Chat services initialized.")
        yield
        if owned:
            await app.state.services.close()
        else:
            await app.state.services.hub.close()
        logger.info("FastAPI application shutdown. Chat services closed.")

    app = FastAPI(
        title="pairchat",
        description="Real-time two-party chat over WebSockets",
        version=__version__,
        lifespan=lifespan,
    )
    if services is not None:
        app.state.services = services

    # Health check routes
    @app.get("/", tags=["health"])
    async def root():
        return {"message": "Chat server is running."}

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy", "sessions": app.state.services.hub.session_count}

    app.include_router(chat_ws_router)  # WS /ws
    app.include_router(metrics_router)  # GET /metrics

    return app


# Create the app instance
app = create_fastapi_app()
