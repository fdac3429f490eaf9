"""
JWT Session Authenticator.

Verifies the HS256 access token issued by the account service. The token
must carry `exp`; `iss` and `aud` are checked when configured. The identity
is read from the configured claim (`userId` by default, `sub` as fallback).
"""

import logging
from typing import Optional, Sequence

import jwt

from pairchat.domain.ports.session_authenticator import SessionAuthenticator
from pairchat.domain.value_objects.auth_result import (
    AuthFailure,
    AuthResult,
    Authenticated,
)
from pairchat.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


class JwtSessionAuthenticator(SessionAuthenticator):
    def __init__(
        self,
        secret: str,
        algorithms: Sequence[str] = ("HS256",),
        issuer: str = "",
        audience: str = "",
        identity_claim: str = "userId",
    ):
        if not secret:
            raise ValueError("SERVICE_AUTH_SECRET must be set")
        self._secret = secret
        self._algorithms = list(algorithms)
        self._issuer = issuer or None
        self._audience = audience or None
        self._identity_claim = identity_claim

        required = ["exp"]
        if self._issuer:
            required.append("iss")
        if self._audience:
            required.append("aud")
        self._options = {"require": required, "verify_aud": bool(self._audience)}

    def authenticate(self, credential: Optional[str]) -> AuthResult:
        if not credential:
            return AuthFailure()

        try:
            claims = jwt.decode(
                credential,
                self._secret,
                algorithms=self._algorithms,
                audience=self._audience,
                issuer=self._issuer,
                options=self._options,
            )
        except jwt.InvalidTokenError as e:
            # Reason stays in the server log only
            logger.info(f"[Auth] Token rejected: {type(e).__name__}")
            return AuthFailure()

        identity = claims.get(self._identity_claim) or claims.get("sub")
        if not isinstance(identity, str):
            logger.info("[Auth] Token rejected: identity claim missing")
            return AuthFailure()

        try:
            return Authenticated(identity=UserId(identity))
        except ValueError:
            logger.info("[Auth] Token rejected: identity claim invalid")
            return AuthFailure()
