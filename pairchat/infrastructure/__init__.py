"""
INFRASTRUCTURE LAYER - Implementations of domain ports.

- auth/         -> PyJWT session authenticator
- persistence/  -> Prisma (PostgreSQL) room directory and message store
- memory/       -> In-process room directory and message store
- cache/        -> Redis read-through cache for room history
"""
