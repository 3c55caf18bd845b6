"""
Authenticated caller passed explicitly into every operation
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UserContext:
    """
    Plain snapshot of the signed-in user. Operations scope every query by
    `id`; the value is detached from any database session so it stays
    readable after a rollback.
    """
    id: str
    email: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "UserContext":
        return cls(id=user.id, email=user.email)
