"""
PersistenceError - Raised when the store is unavailable or rejects a write.
Maps to: chatError event; the message is not broadcast.
"""


class PersistenceError(Exception):
    """Exception raised when a durable operation did not succeed."""

    def __init__(self, message: str = "Storage operation failed"):
        super().__init__(message)
        self.message = message
