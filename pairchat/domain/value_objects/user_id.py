"""
UserId Value Object - the opaque identity carried by an authenticated session.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserId:
    value: str  # user_id claim from the access token

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("UserId cannot be empty")
        if self.value != self.value.strip():
            raise ValueError(f"UserId has surrounding whitespace: {self.value!r}")

    def __str__(self) -> str:
        return self.value
