from pairchat.infrastructure.auth.jwt_authenticator import JwtSessionAuthenticator

__all__ = ["JwtSessionAuthenticator"]
