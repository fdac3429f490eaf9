"""
SessionAuthenticator Port - Verifies the bearer credential of a connection.
Implementation: pairchat/infrastructure/auth/jwt_authenticator.py
"""

from abc import ABC, abstractmethod
from typing import Optional

from pairchat.domain.value_objects.auth_result import AuthResult


class SessionAuthenticator(ABC):
    @abstractmethod
    def authenticate(self, credential: Optional[str]) -> AuthResult:
        """Return Authenticated(identity) or AuthFailure. Never raises, no I/O."""
