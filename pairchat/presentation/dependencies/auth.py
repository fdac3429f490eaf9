"""
Credential extraction for the chat WebSocket handshake.

Accepted, in order:
1. `Authorization: Bearer <token>`
2. `Authorization: <token>` (raw token)
3. `?token=` or `?access_token=` query parameter (browsers cannot set
   headers on a WebSocket)

Verification itself belongs to the SessionAuthenticator.
"""

from typing import Optional

from fastapi import WebSocket


def extract_credential(websocket: WebSocket) -> Optional[str]:
    header = websocket.headers.get("authorization", "").strip()
    if header:
        scheme, _, token = header.partition(" ")
        if scheme.lower() == "bearer":
            return token.strip() or None
        return header

    query = websocket.query_params
    return query.get("token") or query.get("access_token") or None
