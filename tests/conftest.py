from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.timesheet_tracker.timesheet_tracker.container import wire_services
from src.timesheet_tracker.timesheet_tracker.core.exceptions import ConflictError
from src.timesheet_tracker.timesheet_tracker.timesheets.model import DailyTask, NewDailyTask, WeeklyTimesheet
from src.timesheet_tracker.timesheet_tracker.users.model import User


class InMemoryUsers:
    def __init__(self):
        self.by_id: dict[int, User] = {}
        self._ids = itertools.count(1)

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.by_id.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.by_id.values() if u.email == email), None)

    def get_by_active_token(self, token: str) -> Optional[User]:
        return next((u for u in self.by_id.values() if token and u.active_token == token), None)

    def create_user(self, *, name: str, email: str, password_hash: str) -> int:
        if self.get_by_email(email):
            raise ConflictError("User with this email already exists")
        user_id = next(self._ids)
        self.by_id[user_id] = User(user_id=user_id, name=name, email=email, password_hash=password_hash)
        return user_id

    def set_active_token(self, user_id: int, token: Optional[str]) -> bool:
        user = self.by_id.get(int(user_id))
        if not user:
            return False
        self.by_id[user.user_id] = replace(user, active_token=token)
        return True


class InMemoryTimesheets:
    def __init__(self):
        self.by_id: dict[int, WeeklyTimesheet] = {}
        self._ids = itertools.count(1)
        self._task_ids = itertools.count(1)

    def get_for_user(self, *, user_id: int, timesheet_id: int) -> Optional[WeeklyTimesheet]:
        ts = self.by_id.get(int(timesheet_id))
        return ts if ts and ts.user_id == int(user_id) else None

    def get_for_week(self, *, user_id: int, week_start_date: date, week_end_date: date) -> Optional[WeeklyTimesheet]:
        for ts in self.by_id.values():
            if (ts.user_id, ts.week_start_date, ts.week_end_date) == (int(user_id), week_start_date, week_end_date):
                return ts
        return None

    def create(self, *, user_id: int, week_start_date: date, week_end_date: date) -> WeeklyTimesheet:
        if self.get_for_week(user_id=user_id, week_start_date=week_start_date, week_end_date=week_end_date):
            raise ConflictError("A timesheet for this week already exists")
        now = datetime(2026, 1, 1, 9, 0, 0)
        ts = WeeklyTimesheet(
            timesheet_id=next(self._ids),
            user_id=int(user_id),
            week_start_date=week_start_date,
            week_end_date=week_end_date,
            created_at=now,
            updated_at=now,
        )
        self.by_id[ts.timesheet_id] = ts
        return ts

    def _owned(self, user_id: int) -> list[WeeklyTimesheet]:
        return [ts for ts in self.by_id.values() if ts.user_id == int(user_id)]

    def count_for_user(self, *, user_id: int) -> int:
        return len(self._owned(user_id))

    def list_for_user(self, *, user_id: int, offset: int, limit: int):
        items = sorted(self._owned(user_id), key=lambda ts: (ts.week_start_date, ts.timesheet_id), reverse=True)
        return items[offset: offset + limit]

    def add_task(self, *, user_id: int, timesheet_id: int, task: NewDailyTask) -> Optional[DailyTask]:
        ts = self.get_for_user(user_id=user_id, timesheet_id=timesheet_id)
        if not ts:
            return None
        created = DailyTask(
            task_id=next(self._task_ids),
            work_date=task.work_date,
            project=task.project,
            type_of_work=task.type_of_work,
            description=task.description,
            hours=task.hours,
        )
        self.by_id[ts.timesheet_id] = replace(ts, daily_tasks=ts.daily_tasks + (created,))
        return created

    def update_task(self, *, user_id: int, timesheet_id: int, task_id: int, changes: dict) -> Optional[DailyTask]:
        ts = self.get_for_user(user_id=user_id, timesheet_id=timesheet_id)
        if not ts or ts.find_task(task_id) is None:
            return None
        updated = replace(ts.find_task(task_id), **changes)
        tasks = tuple(updated if t.task_id == task_id else t for t in ts.daily_tasks)
        self.by_id[ts.timesheet_id] = replace(ts, daily_tasks=tasks)
        return updated

    def delete_task(self, *, user_id: int, timesheet_id: int, task_id: int) -> bool:
        ts = self.get_for_user(user_id=user_id, timesheet_id=timesheet_id)
        if not ts or ts.find_task(task_id) is None:
            return False
        self.by_id[ts.timesheet_id] = replace(ts, daily_tasks=tuple(t for t in ts.daily_tasks if t.task_id != task_id))
        return True


@pytest.fixture
def users_repo():
    return InMemoryUsers()


@pytest.fixture
def timesheets_repo():
    return InMemoryTimesheets()


@pytest.fixture
def container(users_repo, timesheets_repo):
    return wire_services(users_repo=users_repo, timesheets_repo=timesheets_repo, secret_key="test-secret")


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.timesheet_tracker.timesheet_tracker.main import create_app

    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register(client):
    """Register through the API and return the ``Authorization`` header for that user."""

    def _register(email: str = "ann@x.com", name: str = "Ann Lee", password: str = "longenough1") -> dict:
        resp = client.post("/api/user/register", json={"name": name, "email": email, "password": password})
        assert resp.status_code == 201, resp.get_json()
        return {"Authorization": f"Bearer {resp.get_json()['token']}"}

    return _register
