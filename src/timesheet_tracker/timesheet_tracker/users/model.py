from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class User:
    """Domain entity: a registered account.

    Note: Plain data object (no DB access code). ``active_token`` is the one
    session token currently accepted for this user.
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    active_token: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class AuthenticatedUser:
    """The acting user resolved from a bearer token."""

    user_id: int
    email: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.user_id, "name": self.name, "email": self.email}
