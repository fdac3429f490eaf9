"""
DOMAIN LAYER - Rooms, messages and the identities that own them

This layer contains:
- Entities: Business objects with identity (Room, ChatMessage)
- Value Objects: Immutable types (UserId, RoomId, ParticipantPair)
- Ports: Interfaces that infrastructure and transport implement
- Exceptions: Domain-specific errors

RULES:
1. NO framework imports (no FastAPI, Prisma, Redis, Pydantic, etc.)
2. NO I/O operations
3. Only depends on Python stdlib
"""
