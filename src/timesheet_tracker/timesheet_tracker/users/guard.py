from __future__ import annotations

from typing import Optional

from ..core.exceptions import AuthenticationError
from .model import AuthenticatedUser
from .service import AuthService

BEARER_SCHEME = "Bearer"


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an ``Authorization`` header value.

    ``Bearer <token>`` and a bare ``<token>`` are both accepted.
    """
    if not authorization or not authorization.strip():
        raise AuthenticationError("Authorization header is required")

    value = authorization.strip()
    scheme, _, rest = value.partition(" ")
    if scheme == BEARER_SCHEME:
        value = rest.strip()
    if not value:
        raise AuthenticationError("Token is required")
    return value


class AccessGuard:
    """Resolves the acting user for every protected operation."""

    def __init__(self, auth: AuthService):
        self._auth = auth

    def resolve(self, authorization: Optional[str]) -> tuple[AuthenticatedUser, str]:
        token = extract_bearer_token(authorization)
        return self._auth.validate_token(token), token
