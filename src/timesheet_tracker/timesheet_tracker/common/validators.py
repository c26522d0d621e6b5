from __future__ import annotations

import re

from ..core.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_non_empty(value, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_length(value: str, field_name: str, min_len: int, max_len: int) -> str:
    if len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long")
    if len(value) > max_len:
        raise ValidationError(f"{field_name} cannot exceed {max_len} characters")
    return value


def require_email(value) -> str:
    if not isinstance(value, str) or not EMAIL_PATTERN.match(value):
        raise ValidationError("Please provide a valid email address")
    return value


def normalize_email(value: str) -> str:
    return value.strip().lower()


def require_hours(value, *, min_hours: float, max_hours: float) -> float:
    # bool is an int subclass; "8" is not a number either. NaN fails the range
    # comparison, and ints are compared exactly so huge values never overflow.
    ok = isinstance(value, (int, float)) and not isinstance(value, bool) and min_hours <= value <= max_hours
    if not ok:
        raise ValidationError(f"Hours must be a number between {min_hours} and {max_hours}")
    return float(value)


def parse_positive_int(value, *, default: int) -> int:
    """Lenient query-string integer: falls back to ``default`` when absent, non-numeric or < 1."""
    try:
        n = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return n if n >= 1 else default


def parse_record_id(value, message: str) -> int:
    """Strict identifier parsing; a malformed id is a client error, not a lookup miss."""
    if isinstance(value, bool):
        raise ValidationError(message)
    if isinstance(value, int):
        n = value
    else:
        s = str(value or "").strip()
        if not (s.isascii() and s.isdigit()):
            raise ValidationError(message)
        n = int(s)
    if n < 1:
        raise ValidationError(message)
    return n
