from __future__ import annotations

import math
from typing import Any, Mapping

from ..common.datetime_utils import parse_iso_date
from ..common.validators import (
    is_blank,
    parse_positive_int,
    parse_record_id,
    require_hours,
    require_non_empty,
)
from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MAX_TASK_HOURS, MIN_TASK_HOURS
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.logging import get_logger
from .model import NewDailyTask, Pagination, TaskChange, WeekPage, WeeklyTimesheet
from .repository import TimesheetRepository

logger = get_logger(__name__)

TIMESHEET_NOT_FOUND = "Weekly timesheet not found"
TASK_NOT_FOUND = "Daily task not found"
INVALID_TIMESHEET_ID = "Invalid timesheet ID"
INVALID_TASK_IDS = "Invalid timesheet ID or task ID"

_TASK_TEXT_FIELDS = (
    ("project", "Project"),
    ("type_of_work", "Type of work"),
    ("description", "Description"),
)


class TimesheetService:
    """Use cases on the weekly timesheet aggregate.

    Every lookup is scoped to the acting user; somebody else's week is
    reported exactly like a missing one.
    """

    def __init__(self, timesheets: TimesheetRepository, *, default_page_size: int = DEFAULT_PAGE_SIZE):
        self._timesheets = timesheets
        self._default_page_size = int(default_page_size)

    def _require_owned(self, user_id: int, timesheet_id: int) -> WeeklyTimesheet:
        ts = self._timesheets.get_for_user(user_id=int(user_id), timesheet_id=timesheet_id)
        if not ts:
            raise NotFoundError(TIMESHEET_NOT_FOUND)
        return ts

    def create_week(self, *, user_id: int, week_start_date, week_end_date) -> WeeklyTimesheet:
        if is_blank(week_start_date) or is_blank(week_end_date):
            raise ValidationError("Week start date and end date are required")

        start = parse_iso_date(week_start_date)
        end = parse_iso_date(week_end_date)
        if start > end:
            raise ValidationError("Start date cannot be after end date")

        if self._timesheets.get_for_week(user_id=int(user_id), week_start_date=start, week_end_date=end):
            raise ConflictError("A timesheet for this week already exists")

        ts = self._timesheets.create(user_id=int(user_id), week_start_date=start, week_end_date=end)
        logger.info("User id=%s created timesheet id=%s (%s..%s)", user_id, ts.timesheet_id, start, end)
        return ts

    def list_weeks(self, *, user_id: int, page=None, limit=None) -> WeekPage:
        page = parse_positive_int(page, default=DEFAULT_PAGE)
        limit = min(parse_positive_int(limit, default=self._default_page_size), MAX_PAGE_SIZE)

        total = self._timesheets.count_for_user(user_id=int(user_id))
        total_pages = max(1, math.ceil(total / limit))
        if page > total_pages:
            page = total_pages

        items = self._timesheets.list_for_user(user_id=int(user_id), offset=(page - 1) * limit, limit=limit)
        return WeekPage(
            items=list(items),
            pagination=Pagination(
                current_page=page,
                total_pages=total_pages,
                total_items=total,
                items_per_page=limit,
            ),
        )

    def get_week(self, *, user_id: int, timesheet_id) -> WeeklyTimesheet:
        ts_id = parse_record_id(timesheet_id, INVALID_TIMESHEET_ID)
        return self._require_owned(user_id, ts_id)

    @staticmethod
    def _validate_new_task(payload: Mapping[str, Any]) -> NewDailyTask:
        required = ("date", "project", "type_of_work", "description")
        if any(is_blank(payload.get(k)) for k in required) or payload.get("hours") is None:
            raise ValidationError("Date, project, type of work, description, and hours are required")

        hours = require_hours(payload["hours"], min_hours=MIN_TASK_HOURS, max_hours=MAX_TASK_HOURS)
        work_date = parse_iso_date(payload["date"])
        text = {k: require_non_empty(payload[k], label) for k, label in _TASK_TEXT_FIELDS}

        return NewDailyTask(
            work_date=work_date,
            project=text["project"],
            type_of_work=text["type_of_work"],
            description=text["description"],
            hours=hours,
        )

    @staticmethod
    def _validate_task_changes(payload: Mapping[str, Any]) -> dict:
        """Only keys present (and not None) are changed; the rest stay as stored."""
        changes: dict = {}
        if payload.get("hours") is not None:
            changes["hours"] = require_hours(payload["hours"], min_hours=MIN_TASK_HOURS, max_hours=MAX_TASK_HOURS)
        if payload.get("date") is not None:
            changes["work_date"] = parse_iso_date(payload["date"])
        for key, label in _TASK_TEXT_FIELDS:
            if payload.get(key) is not None:
                changes[key] = require_non_empty(payload[key], label)
        return changes

    def add_task(self, *, user_id: int, timesheet_id, payload: Mapping[str, Any]) -> TaskChange:
        ts_id = parse_record_id(timesheet_id, INVALID_TIMESHEET_ID)
        new_task = self._validate_new_task(payload)

        task = self._timesheets.add_task(user_id=int(user_id), timesheet_id=ts_id, task=new_task)
        if task is None:
            raise NotFoundError(TIMESHEET_NOT_FOUND)

        logger.info("User id=%s added task id=%s to timesheet id=%s", user_id, task.task_id, ts_id)
        return TaskChange(timesheet=self._require_owned(user_id, ts_id), task=task)

    def update_task(self, *, user_id: int, timesheet_id, task_id, payload: Mapping[str, Any]) -> TaskChange:
        ts_id = parse_record_id(timesheet_id, INVALID_TASK_IDS)
        t_id = parse_record_id(task_id, INVALID_TASK_IDS)
        changes = self._validate_task_changes(payload)

        ts = self._require_owned(user_id, ts_id)
        task = ts.find_task(t_id)
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)

        if changes:
            task = self._timesheets.update_task(user_id=int(user_id), timesheet_id=ts_id, task_id=t_id, changes=changes)
            if task is None:
                raise NotFoundError(TASK_NOT_FOUND)
            logger.info("User id=%s updated task id=%s (%s)", user_id, t_id, ", ".join(sorted(changes)))

        return TaskChange(timesheet=self._require_owned(user_id, ts_id), task=task)

    def delete_task(self, *, user_id: int, timesheet_id, task_id) -> TaskChange:
        ts_id = parse_record_id(timesheet_id, INVALID_TASK_IDS)
        t_id = parse_record_id(task_id, INVALID_TASK_IDS)

        ts = self._require_owned(user_id, ts_id)
        if ts.find_task(t_id) is None:
            raise NotFoundError(TASK_NOT_FOUND)

        if not self._timesheets.delete_task(user_id=int(user_id), timesheet_id=ts_id, task_id=t_id):
            raise NotFoundError(TASK_NOT_FOUND)

        logger.info("User id=%s deleted task id=%s from timesheet id=%s", user_id, t_id, ts_id)
        return TaskChange(timesheet=self._require_owned(user_id, ts_id))
