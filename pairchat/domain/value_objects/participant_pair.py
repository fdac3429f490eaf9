"""
ParticipantPair Value Object - the unordered pair of identities that keys a room.

The pair is normalized on construction (sorted by identity), so
ParticipantPair.of(a, b) == ParticipantPair.of(b, a) and both produce the
same storage key.
"""

from __future__ import annotations
from dataclasses import dataclass

from pairchat.domain.exceptions import DomainValidationError
from pairchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class ParticipantPair:
    first: UserId
    second: UserId

    def __post_init__(self):
        if self.first == self.second:
            raise DomainValidationError("A room needs two distinct participants")
        if self.first.value > self.second.value:
            raise ValueError("ParticipantPair must be built with ParticipantPair.of()")

    @classmethod
    def of(cls, user_a: UserId, user_b: UserId) -> ParticipantPair:
        first, second = sorted((user_a, user_b), key=lambda user: user.value)
        return cls(first=first, second=second)

    @property
    def key(self) -> str:
        # Length prefix keeps the key unambiguous whatever characters ids contain
        return f"{len(self.first.value)}:{self.first.value}:{self.second.value}"

    def contains(self, user: UserId) -> bool:
        return user == self.first or user == self.second

    def other(self, user: UserId) -> UserId:
        if user == self.first:
            return self.second
        if user == self.second:
            return self.first
        raise ValueError(f"{user} is not a participant")

    def __iter__(self):
        yield self.first
        yield self.second
