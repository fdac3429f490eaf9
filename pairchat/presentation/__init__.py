"""
PRESENTATION LAYER - FastAPI transport.

- api/                    -> routers (WebSocket chat, metrics)
- dependencies/           -> request-scoped helpers (credential extraction, hub lookup)
- websocket_connection.py -> Connection adapter over a Starlette WebSocket
"""
