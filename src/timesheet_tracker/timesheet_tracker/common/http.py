"""Flask glue shared by the controllers: JSON bodies, error mapping, bearer auth."""
from __future__ import annotations

from functools import wraps
from typing import Callable

from flask import current_app, g, jsonify, request

from ..core.exceptions import (
    AuthenticationError,
    ConflictError,
    DomainError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from ..core.logging import get_logger

logger = get_logger(__name__)

STATUS_BY_ERROR = (
    (ValidationError, 400),
    (ConflictError, 400),
    (AuthenticationError, 401),
    (NotFoundError, 404),
    (InternalError, 500),
)


def status_for(error: DomainError) -> int:
    for cls, status in STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 500


def error_response(message: str, status: int):
    return jsonify({"message": message}), status


def json_body() -> dict:
    """Request JSON as a dict; anything else (missing, invalid, a list) reads as ``{}``."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def json_errors(view: Callable):
    """Translate domain errors to ``{message}`` responses; hide everything else behind a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            status = status_for(e)
            if status >= 500:
                logger.error("%s %s failed: %s", request.method, request.path, e)
                return error_response("Internal server error", status)
            return error_response(str(e), status)
        except Exception as e:
            logger.exception("Unhandled error on %s %s", request.method, request.path)
            if bool(current_app.config.get("DEBUG", False)):
                return error_response(f"Internal server error: {e}", 500)
            return error_response("Internal server error", 500)

    return wrapper


def token_required(guard) -> Callable:
    """Resolve the acting user from ``Authorization`` into ``g.current_user`` / ``g.token``."""

    def decorator(view: Callable):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                user, token = guard.resolve(request.headers.get("Authorization"))
            except AuthenticationError as e:
                logger.info("Rejected %s %s: %s", request.method, request.path, e)
                return error_response(str(e), 401)
            g.current_user = user
            g.token = token
            return view(*args, **kwargs)

        return wrapper

    return decorator
