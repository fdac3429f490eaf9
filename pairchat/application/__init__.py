"""
APPLICATION LAYER - Use Cases & Orchestration

This layer contains:
- commands/  → Write operations (join a room, send a message)
- queries/   → Read operations (room history)
- services/  → ChatHub: live sessions, subscriptions, fan-out
- dto/       → Wire payloads exchanged with clients
- common/    → Shared interfaces (Command, Query base classes)

Rules:
- Depends on Domain layer only (plus pydantic for DTOs)
- No transport/framework code here
"""
