from __future__ import annotations

from typing import Optional, Protocol

from .model import User


class UserRepository(Protocol):
    """Identity store.

    Note (DIP): the services depend on this interface, not on a concrete DB.
    ``email`` arguments are already normalized (trimmed, lowercased).
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_active_token(self, token: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, name: str, email: str, password_hash: str) -> int:
        """Insert a user; raises ConflictError when the email is taken."""
        raise NotImplementedError

    def set_active_token(self, user_id: int, token: Optional[str]) -> bool:
        raise NotImplementedError
