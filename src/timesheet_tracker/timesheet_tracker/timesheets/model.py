from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_date, format_timestamp
from ..core.constants import COMPLETED_WEEK_HOURS
from ..core.enums import WeekStatus


@dataclass(frozen=True)
class DailyTask:
    """Domain entity: one work-log line inside a weekly timesheet.

    A task has no lookup path of its own; it is always addressed through its
    parent as ``(timesheet_id, task_id)``.
    """

    task_id: int
    work_date: date
    project: str
    type_of_work: str
    description: str
    hours: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.task_id,
            "date": format_date(self.work_date),
            "project": self.project,
            "typeOfWork": self.type_of_work,
            "description": self.description,
            "hours": self.hours,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }


@dataclass(frozen=True)
class NewDailyTask:
    """Validated input for appending a task."""

    work_date: date
    project: str
    type_of_work: str
    description: str
    hours: float


@dataclass(frozen=True)
class WeeklyTimesheet:
    """Aggregate root: one user's week and the tasks logged in it."""

    timesheet_id: int
    user_id: int
    week_start_date: date
    week_end_date: date
    daily_tasks: tuple[DailyTask, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def total_hours(self) -> float:
        return sum((t.hours for t in self.daily_tasks), 0)

    @property
    def status(self) -> WeekStatus:
        total = self.total_hours
        if total == 0:
            return WeekStatus.MISSING
        if total >= COMPLETED_WEEK_HOURS:
            return WeekStatus.COMPLETED
        return WeekStatus.INCOMPLETE

    def find_task(self, task_id: int) -> Optional[DailyTask]:
        for t in self.daily_tasks:
            if t.task_id == task_id:
                return t
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.timesheet_id,
            "weekStartDate": format_date(self.week_start_date),
            "weekEndDate": format_date(self.week_end_date),
            "dailyTasks": [t.to_dict() for t in self.daily_tasks],
            "totalHours": self.total_hours,
            "status": self.status.value,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }

    def summary_dict(self) -> dict:
        return {"id": self.timesheet_id, "totalHours": self.total_hours}


@dataclass(frozen=True)
class Pagination:
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int

    def to_dict(self) -> dict:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalItems": self.total_items,
            "itemsPerPage": self.items_per_page,
        }


@dataclass(frozen=True)
class WeekPage:
    items: list[WeeklyTimesheet]
    pagination: Pagination


@dataclass(frozen=True)
class TaskChange:
    """Result of a task mutation: the task touched (None after a delete) and the new total."""

    timesheet: WeeklyTimesheet
    task: Optional[DailyTask] = None

    @property
    def total_hours(self) -> float:
        return self.timesheet.total_hours
