"""
DOMAIN EXCEPTIONS - Business rule violations

These exceptions are raised by domain and application logic and handled by
the ChatHub, which maps them to connection outcomes:
- AccessDeniedError     -> connection closed, nothing disclosed
- DomainValidationError -> chatError event to the requester
- PersistenceError      -> chatError event to the requester, no broadcast
"""

from pairchat.domain.exceptions.access_denied import AccessDeniedError
from pairchat.domain.exceptions.validation_error import DomainValidationError
from pairchat.domain.exceptions.persistence_error import PersistenceError

__all__ = [
    "AccessDeniedError",
    "DomainValidationError",
    "PersistenceError",
]
