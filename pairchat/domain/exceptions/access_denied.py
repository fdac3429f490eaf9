"""
AccessDeniedError - Raised when a user is not a participant of the room.
Maps to: connection closed (policy violation)
"""


class AccessDeniedError(Exception):
    """Raised when user lacks permission to access a room"""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)
