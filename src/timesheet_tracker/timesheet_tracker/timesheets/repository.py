from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import DailyTask, NewDailyTask, WeeklyTimesheet


class TimesheetRepository(Protocol):
    """Storage for the weekly timesheet aggregate.

    Every read is scoped by ``user_id``; a row owned by someone else is
    returned as ``None``. Task mutations must be atomic per timesheet.
    """

    def get_for_user(self, *, user_id: int, timesheet_id: int) -> Optional[WeeklyTimesheet]:
        raise NotImplementedError

    def get_for_week(self, *, user_id: int, week_start_date: date, week_end_date: date) -> Optional[WeeklyTimesheet]:
        raise NotImplementedError

    def create(self, *, user_id: int, week_start_date: date, week_end_date: date) -> WeeklyTimesheet:
        """Insert an empty timesheet; raises ConflictError on a duplicate week."""
        raise NotImplementedError

    def count_for_user(self, *, user_id: int) -> int:
        raise NotImplementedError

    def list_for_user(self, *, user_id: int, offset: int, limit: int) -> Sequence[WeeklyTimesheet]:
        """Newest week first (week_start_date desc, then id desc)."""
        raise NotImplementedError

    def add_task(self, *, user_id: int, timesheet_id: int, task: NewDailyTask) -> Optional[DailyTask]:
        """Append a task; ``None`` when the timesheet is not the user's."""
        raise NotImplementedError

    def update_task(self, *, user_id: int, timesheet_id: int, task_id: int, changes: dict) -> Optional[DailyTask]:
        """Apply ``changes`` (DailyTask field name -> value); ``None`` when nothing matched."""
        raise NotImplementedError

    def delete_task(self, *, user_id: int, timesheet_id: int, task_id: int) -> bool:
        raise NotImplementedError
