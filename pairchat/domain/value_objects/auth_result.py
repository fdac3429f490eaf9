"""
Authentication outcome of a connection attempt.

Every verification problem (missing, malformed, expired, bad signature,
missing identity claim) is the same AuthFailure; callers cannot tell which
check failed.
"""

from dataclasses import dataclass
from typing import Union

from pairchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class Authenticated:
    identity: UserId


@dataclass(frozen=True)
class AuthFailure:
    pass


AuthResult = Union[Authenticated, AuthFailure]
