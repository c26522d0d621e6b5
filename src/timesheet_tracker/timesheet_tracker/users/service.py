from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import (
    is_blank,
    normalize_email,
    require_email,
    require_length,
)
from ..core.constants import (
    MAX_NAME_LENGTH,
    MAX_PASSWORD_LENGTH,
    MIN_NAME_LENGTH,
    MIN_PASSWORD_LENGTH,
)
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ..core.logging import get_logger
from .model import AuthenticatedUser, User
from .repository import UserRepository
from .tokens import TokenService

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass(frozen=True)
class SessionInfo:
    """What register/login hand back to the client."""

    name: str
    email: str
    token: str

    def to_dict(self) -> dict:
        return {"name": self.name, "email": self.email, "token": self.token}


class AuthService:
    """Use cases: register, login, logout and token validation.

    A user holds at most one active token; issuing a new one (register/login)
    overwrites it, which ends any session opened elsewhere.
    """

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def _start_session(self, user_id: int, *, name: str, email: str) -> SessionInfo:
        token = self._tokens.issue(user_id=user_id, email=email, name=name)
        self._users.set_active_token(user_id, token)
        return SessionInfo(name=name, email=email, token=token)

    def register(self, *, name, email, password) -> SessionInfo:
        if is_blank(name) or is_blank(email) or is_blank(password):
            raise ValidationError("All fields are required")
        if not all(isinstance(v, str) for v in (name, email, password)):
            raise ValidationError("All fields are required")

        name = require_length(name.strip(), "Name", MIN_NAME_LENGTH, MAX_NAME_LENGTH)
        email = normalize_email(require_email(email.strip()))
        require_length(password, "Password", MIN_PASSWORD_LENGTH, MAX_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ConflictError("User with this email already exists")

        # create_user raises ConflictError too if a concurrent register won the race.
        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
        )
        logger.info("Registered user id=%s", user_id)
        return self._start_session(user_id, name=name, email=email)

    def authenticate(self, *, email, password) -> SessionInfo:
        if is_blank(email) or is_blank(password):
            raise ValidationError("Email and password are required")
        if not isinstance(email, str) or not isinstance(password, str):
            raise ValidationError("Email and password are required")
        email = normalize_email(require_email(email.strip()))

        user = self._users.get_by_email(email)
        if not user:
            logger.info("Login rejected: unknown email")
            raise AuthenticationError(INVALID_CREDENTIALS)

        try:
            ok = check_password_hash(user.password_hash, password)
        except (TypeError, ValueError):
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            logger.info("Login rejected for user id=%s", user.user_id)
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info("User id=%s logged in", user.user_id)
        return self._start_session(user.user_id, name=user.name, email=user.email)

    def logout(self, token) -> None:
        if is_blank(token) or not isinstance(token, str):
            raise AuthenticationError("Token is required")

        user = self._users.get_by_active_token(token)
        if not user:
            raise AuthenticationError("Invalid token")

        self._users.set_active_token(user.user_id, None)
        logger.info("User id=%s logged out", user.user_id)

    def validate_token(self, token, *, now: datetime | None = None) -> AuthenticatedUser:
        claims = self._tokens.decode(token, now=now)

        user = self._users.get_by_id(claims.user_id)
        if not user:
            raise AuthenticationError("User not found")
        if user.active_token != token:
            raise AuthenticationError("Invalid token")

        return AuthenticatedUser(user_id=user.user_id, email=user.email, name=user.name)


class UserService:
    """Use case: read the acting user's own profile."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get_self(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user
