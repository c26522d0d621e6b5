from __future__ import annotations

from datetime import date, datetime, timezone

from ..core.exceptions import ValidationError


def parse_iso_date(value) -> date:
    """Parse a calendar date from ``YYYY-MM-DD`` or a full ISO-8601 timestamp.

    ``date``/``datetime`` instances pass through. Anything else raises
    ``ValidationError("Invalid date format")``.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Invalid date format")

    v = value.strip()
    try:
        return datetime.strptime(v, "%Y-%m-%d").date()
    except ValueError:
        pass
    try:
        # Accept the trailing "Z" that JavaScript clients send.
        return datetime.fromisoformat(v.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValidationError("Invalid date format")


def format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def format_timestamp(value: datetime | None) -> str | None:
    """ISO-8601 with an explicit UTC offset; naive values are stored as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def now_utc() -> datetime:
    """Current UTC time, naive (matches MySQL DATETIME columns).

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
