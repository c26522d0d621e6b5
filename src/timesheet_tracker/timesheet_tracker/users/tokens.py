"""Signed, expiring bearer tokens.

Tokens are ``itsdangerous`` URL-safe timed signatures over
``{id, email, name, jti}``. The random ``jti`` makes two logins in the same
second produce different tokens.
"""
from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from itsdangerous import BadData, URLSafeTimedSerializer

from ..core.constants import DEFAULT_TOKEN_TTL_DAYS
from ..core.exceptions import AuthenticationError, TokenExpiredError


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    name: str
    issued_at: datetime


class TokenService:
    SALT = "timesheet-tracker.session"

    def __init__(self, secret_key: str, *, ttl: timedelta = timedelta(days=DEFAULT_TOKEN_TTL_DAYS)):
        if not secret_key:
            raise ValueError("secret_key is required")
        self._serializer = URLSafeTimedSerializer(secret_key, salt=self.SALT)
        self._ttl = ttl

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, *, user_id: int, email: str, name: str) -> str:
        payload = {"id": int(user_id), "email": email, "name": name, "jti": secrets.token_hex(8)}
        return self._serializer.dumps(payload)

    def decode(self, token: str, *, now: datetime | None = None) -> TokenClaims:
        """Verify signature and expiry.

        Raises ``AuthenticationError("Invalid token")`` for anything that is not
        a token we signed, and ``TokenExpiredError`` once ``ttl`` has elapsed.
        """
        if not token:
            raise AuthenticationError("Token is required")
        try:
            payload, issued_at = self._serializer.loads(token, return_timestamp=True)
        except BadData:
            raise AuthenticationError("Invalid token")

        now = now or datetime.now(timezone.utc)
        if now - issued_at > self._ttl:
            raise TokenExpiredError("Token has expired")

        try:
            return TokenClaims(
                user_id=int(payload["id"]),
                email=str(payload["email"]),
                name=str(payload["name"]),
                issued_at=issued_at,
            )
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token")
