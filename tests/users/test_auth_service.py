from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.timesheet_tracker.timesheet_tracker.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    TokenExpiredError,
    ValidationError,
)
from src.timesheet_tracker.timesheet_tracker.users.guard import extract_bearer_token


def _register(container, email="ann@x.com", password="longenough1", name="Ann Lee"):
    return container.auth_service.register(name=name, email=email, password=password)


def test_register_stores_hash_and_active_token(container, users_repo):
    session = _register(container, email="  Ann@X.com ")

    user = users_repo.get_by_email("ann@x.com")
    assert session.email == "ann@x.com"
    assert session.name == "Ann Lee"
    assert user.password_hash != "longenough1"
    assert user.active_token == session.token


@pytest.mark.parametrize(
    "name, email, password, message",
    [
        ("", "ann@x.com", "longenough1", "All fields are required"),
        ("Ann", None, "longenough1", "All fields are required"),
        ("A", "ann@x.com", "longenough1", "at least 2"),
        ("A" * 51, "ann@x.com", "longenough1", "cannot exceed 50"),
        ("Ann", "bad-email", "longenough1", "valid email"),
        ("Ann", "ann@x.com", "short", "at least 8"),
        ("Ann", "ann@x.com", "x" * 129, "cannot exceed 128"),
    ],
)
def test_register_validation(container, name, email, password, message):
    with pytest.raises(ValidationError, match=message):
        container.auth_service.register(name=name, email=email, password=password)


def test_register_same_email_twice_conflicts_case_insensitively(container):
    _register(container, email="ann@x.com")
    with pytest.raises(ConflictError):
        _register(container, email="ANN@x.com")


def test_login_failures_share_one_message(container):
    _register(container)

    with pytest.raises(AuthenticationError) as wrong_password:
        container.auth_service.authenticate(email="ann@x.com", password="wrong-password")
    with pytest.raises(AuthenticationError) as unknown_email:
        container.auth_service.authenticate(email="nobody@x.com", password="longenough1")

    assert str(wrong_password.value) == str(unknown_email.value) == "Invalid email or password"


def test_login_validation(container):
    with pytest.raises(ValidationError):
        container.auth_service.authenticate(email="", password="longenough1")
    with pytest.raises(ValidationError):
        container.auth_service.authenticate(email="bad-email", password="longenough1")


def test_login_replaces_previous_session(container):
    first = _register(container)
    second = container.auth_service.authenticate(email="ann@x.com", password="longenough1")

    assert container.auth_service.validate_token(second.token).email == "ann@x.com"
    with pytest.raises(AuthenticationError, match="Invalid token"):
        container.auth_service.validate_token(first.token)


def test_logout_clears_token_and_is_not_repeatable(container, users_repo):
    session = _register(container)

    container.auth_service.logout(session.token)

    assert users_repo.get_by_email("ann@x.com").active_token is None
    with pytest.raises(AuthenticationError):
        container.auth_service.validate_token(session.token)
    with pytest.raises(AuthenticationError):
        container.auth_service.logout(session.token)


def test_validate_token_requires_existing_user(container, users_repo):
    session = _register(container)
    users_repo.by_id.clear()

    with pytest.raises(AuthenticationError, match="User not found"):
        container.auth_service.validate_token(session.token)


def test_validate_token_expired(container):
    session = _register(container)
    later = datetime.now(timezone.utc) + timedelta(days=8)

    with pytest.raises(TokenExpiredError):
        container.auth_service.validate_token(session.token, now=later)


def test_get_self_unknown_user(container):
    with pytest.raises(NotFoundError):
        container.user_service.get_self(99)


def test_access_guard_resolves_acting_user(container):
    session = _register(container)

    user, token = container.access_guard.resolve(f"Bearer {session.token}")

    assert token == session.token
    assert user.to_dict()["email"] == "ann@x.com"


@pytest.mark.parametrize("header", [None, "", "   ", "Bearer ", "Bearer    "])
def test_extract_bearer_token_rejects_missing(header):
    with pytest.raises(AuthenticationError):
        extract_bearer_token(header)


def test_extract_bearer_token_accepts_bare_token():
    assert extract_bearer_token("abc.def") == "abc.def"
    assert extract_bearer_token("Bearer abc.def") == "abc.def"
