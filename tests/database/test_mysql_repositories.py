"""MySQL repositories against a scripted fake connection (no server needed)."""
from __future__ import annotations

from datetime import date

import pytest
from mysql.connector.errors import IntegrityError

from src.timesheet_tracker.timesheet_tracker.core.exceptions import ConflictError
from src.timesheet_tracker.timesheet_tracker.timesheets.model import NewDailyTask
from src.timesheet_tracker.timesheet_tracker.timesheets.mysql_timesheet_repository import MySQLTimesheetRepository
from src.timesheet_tracker.timesheet_tracker.users.mysql_user_repository import MySQLUserRepository


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.lastrowid = None
        self.rowcount = 0

    def execute(self, sql, params=()):
        self._conn.executed.append((" ".join(sql.split()), params))
        if self._conn.fail_with is not None:
            raise self._conn.fail_with
        self.lastrowid = self._conn.lastrowid
        self.rowcount = self._conn.rowcount

    def fetchone(self):
        return self._conn.results.pop(0) if self._conn.results else None

    def fetchall(self):
        return self._conn.results.pop(0) if self._conn.results else []

    def close(self):
        pass


class FakeConnection:
    def __init__(self):
        self.executed: list[tuple[str, tuple]] = []
        self.results: list = []
        self.fail_with = None
        self.lastrowid = 7
        self.rowcount = 1
        self.committed = 0
        self.rolled_back = 0

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.committed += 1

    def rollback(self):
        self.rolled_back += 1

    def close(self):
        pass


class FakeFactory:
    def __init__(self):
        self.conn = FakeConnection()

    def connect(self, *, with_database=True):
        return self.conn


@pytest.fixture
def factory():
    return FakeFactory()


def test_duplicate_email_maps_to_conflict(factory):
    factory.conn.fail_with = IntegrityError(msg="Duplicate entry", errno=1062)

    with pytest.raises(ConflictError):
        MySQLUserRepository(factory).create_user(name="Ann", email="ann@x.com", password_hash="h")
    assert factory.conn.rolled_back == 1


def test_other_integrity_errors_propagate(factory):
    factory.conn.fail_with = IntegrityError(msg="FK", errno=1452)

    with pytest.raises(IntegrityError):
        MySQLTimesheetRepository(factory).create(user_id=1, week_start_date=date(2026, 2, 2), week_end_date=date(2026, 2, 8))


def test_duplicate_week_maps_to_conflict(factory):
    factory.conn.fail_with = IntegrityError(msg="Duplicate entry", errno=1062)

    with pytest.raises(ConflictError, match="already exists"):
        MySQLTimesheetRepository(factory).create(user_id=1, week_start_date=date(2026, 2, 2), week_end_date=date(2026, 2, 8))


def test_add_task_locks_parent_row_first(factory):
    factory.conn.results = [{"timesheet_id": 3}]
    task = NewDailyTask(
        work_date=date(2026, 2, 3),
        project="Apollo",
        type_of_work="Dev",
        description="API",
        hours=8,
    )

    created = MySQLTimesheetRepository(factory).add_task(user_id=1, timesheet_id=3, task=task)

    sql = [s for s, _ in factory.conn.executed]
    assert sql[0].endswith("FOR UPDATE")
    assert sql[1].startswith("INSERT INTO daily_tasks")
    assert sql[2].startswith("UPDATE weekly_timesheets SET updated_at")
    assert created.task_id == 7
    assert created.hours == 8.0 and isinstance(created.hours, float)
    assert factory.conn.committed == 1


def test_add_task_on_foreign_timesheet_writes_nothing(factory):
    factory.conn.results = [None]

    assert MySQLTimesheetRepository(factory).add_task(
        user_id=2,
        timesheet_id=3,
        task=NewDailyTask(work_date=date(2026, 2, 3), project="p", type_of_work="t", description="d", hours=1),
    ) is None
    assert len(factory.conn.executed) == 1


def test_update_task_maps_fields_to_columns(factory):
    row = {
        "task_id": 5,
        "timesheet_id": 3,
        "task_date": date(2026, 2, 4),
        "project": "Apollo",
        "type_of_work": "Dev",
        "description": "API",
        "hours": 6.5,
    }
    factory.conn.results = [{"timesheet_id": 3}, row, row]

    task = MySQLTimesheetRepository(factory).update_task(
        user_id=1, timesheet_id=3, task_id=5, changes={"work_date": date(2026, 2, 4), "hours": 6.5}
    )

    update_sql, params = factory.conn.executed[2]
    assert update_sql.startswith("UPDATE daily_tasks SET task_date=%s, hours=%s, updated_at=%s")
    assert params[:2] == (date(2026, 2, 4), 6.5)
    assert params[-2:] == (5, 3)
    assert task.hours == 6.5


def test_list_for_user_orders_with_id_tiebreak(factory):
    factory.conn.results = [[]]

    assert MySQLTimesheetRepository(factory).list_for_user(user_id=1, offset=10, limit=10) == []

    sql, params = factory.conn.executed[0]
    assert "ORDER BY week_start_date DESC, timesheet_id DESC" in sql
    assert params == (1, 10, 10)
