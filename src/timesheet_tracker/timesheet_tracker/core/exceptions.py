class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or out of range."""


class ConflictError(DomainError):
    """Raised when a uniqueness rule would be violated."""


class AuthenticationError(DomainError):
    """Raised when credentials or a bearer token are rejected."""


class TokenExpiredError(AuthenticationError):
    """Raised when a correctly signed token is past its validity window."""


class NotFoundError(DomainError):
    """Raised when a record is absent or not owned by the acting user."""


class InternalError(DomainError):
    """Raised for failures that must not leak internals to the client."""
