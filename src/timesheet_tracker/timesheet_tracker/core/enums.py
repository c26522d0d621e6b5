from __future__ import annotations

from enum import Enum


class WeekStatus(str, Enum):
    """Progress of a weekly timesheet, derived from its total hours."""

    MISSING = "missing"
    INCOMPLETE = "incomplete"
    COMPLETED = "completed"
