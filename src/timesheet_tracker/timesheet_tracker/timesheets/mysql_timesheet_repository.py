from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..common.datetime_utils import now_utc
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import DailyTask, NewDailyTask, WeeklyTimesheet
from .repository import TimesheetRepository

_TASK_COLUMNS = {
    "work_date": "task_date",
    "project": "project",
    "type_of_work": "type_of_work",
    "description": "description",
    "hours": "hours",
}


def _row_to_task(r: dict) -> DailyTask:
    return DailyTask(
        task_id=int(r["task_id"]),
        work_date=r["task_date"],
        project=r["project"],
        type_of_work=r["type_of_work"],
        description=r["description"],
        hours=float(r["hours"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _row_to_timesheet(r: dict, tasks: Sequence[DailyTask]) -> WeeklyTimesheet:
    return WeeklyTimesheet(
        timesheet_id=int(r["timesheet_id"]),
        user_id=int(r["user_id"]),
        week_start_date=r["week_start_date"],
        week_end_date=r["week_end_date"],
        daily_tasks=tuple(tasks),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLTimesheetRepository(TimesheetRepository):
    """Timesheets in ``weekly_timesheets`` with their tasks in ``daily_tasks``.

    Task mutations lock the parent row first (SELECT ... FOR UPDATE) so two
    writers on the same week are serialized like a single-document update.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load_tasks(self, cur, timesheet_ids: Sequence[int]) -> dict[int, list[DailyTask]]:
        out: dict[int, list[DailyTask]] = {int(i): [] for i in timesheet_ids}
        if not out:
            return out
        placeholders = ",".join(["%s"] * len(out))
        cur.execute(
            f"""
            SELECT task_id, timesheet_id, task_date, project, type_of_work, description, hours,
                   created_at, updated_at
            FROM daily_tasks
            WHERE timesheet_id IN ({placeholders})
            ORDER BY task_id ASC
            """,
            tuple(out.keys()),
        )
        for r in fetchall(cur):
            out[int(r["timesheet_id"])].append(_row_to_task(r))
        return out

    def _get_one(self, where: str, params: tuple) -> Optional[WeeklyTimesheet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT timesheet_id, user_id, week_start_date, week_end_date, created_at, updated_at
                FROM weekly_timesheets
                WHERE {where}
                """,
                params,
            )
            r = fetchone(cur)
            if not r:
                return None
            tasks = self._load_tasks(cur, [int(r["timesheet_id"])])
            return _row_to_timesheet(r, tasks[int(r["timesheet_id"])])

    def get_for_user(self, *, user_id: int, timesheet_id: int) -> Optional[WeeklyTimesheet]:
        return self._get_one("timesheet_id=%s AND user_id=%s", (int(timesheet_id), int(user_id)))

    def get_for_week(self, *, user_id: int, week_start_date: date, week_end_date: date) -> Optional[WeeklyTimesheet]:
        return self._get_one(
            "user_id=%s AND week_start_date=%s AND week_end_date=%s",
            (int(user_id), week_start_date, week_end_date),
        )

    def create(self, *, user_id: int, week_start_date: date, week_end_date: date) -> WeeklyTimesheet:
        now = now_utc()
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO weekly_timesheets(user_id, week_start_date, week_end_date, created_at, updated_at)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(user_id), week_start_date, week_end_date, now, now),
                )
                new_id = int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("A timesheet for this week already exists") from e
            raise

        return WeeklyTimesheet(
            timesheet_id=new_id,
            user_id=int(user_id),
            week_start_date=week_start_date,
            week_end_date=week_end_date,
            daily_tasks=(),
            created_at=now,
            updated_at=now,
        )

    def count_for_user(self, *, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM weekly_timesheets WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def list_for_user(self, *, user_id: int, offset: int, limit: int) -> Sequence[WeeklyTimesheet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT timesheet_id, user_id, week_start_date, week_end_date, created_at, updated_at
                FROM weekly_timesheets
                WHERE user_id=%s
                ORDER BY week_start_date DESC, timesheet_id DESC
                LIMIT %s OFFSET %s
                """,
                (int(user_id), int(limit), int(offset)),
            )
            rows = fetchall(cur)
            tasks = self._load_tasks(cur, [int(r["timesheet_id"]) for r in rows])
            return [_row_to_timesheet(r, tasks[int(r["timesheet_id"])]) for r in rows]

    def _lock_owned(self, cur, *, user_id: int, timesheet_id: int) -> bool:
        cur.execute(
            "SELECT timesheet_id FROM weekly_timesheets WHERE timesheet_id=%s AND user_id=%s FOR UPDATE",
            (int(timesheet_id), int(user_id)),
        )
        return fetchone(cur) is not None

    def _touch(self, cur, *, timesheet_id: int, now) -> None:
        cur.execute(
            "UPDATE weekly_timesheets SET updated_at=%s WHERE timesheet_id=%s",
            (now, int(timesheet_id)),
        )

    def _get_task(self, cur, *, timesheet_id: int, task_id: int) -> Optional[DailyTask]:
        cur.execute(
            """
            SELECT task_id, timesheet_id, task_date, project, type_of_work, description, hours,
                   created_at, updated_at
            FROM daily_tasks
            WHERE task_id=%s AND timesheet_id=%s
            """,
            (int(task_id), int(timesheet_id)),
        )
        r = fetchone(cur)
        return _row_to_task(r) if r else None

    def add_task(self, *, user_id: int, timesheet_id: int, task: NewDailyTask) -> Optional[DailyTask]:
        now = now_utc()
        with db_cursor(self._conn_factory) as (_, cur):
            if not self._lock_owned(cur, user_id=user_id, timesheet_id=timesheet_id):
                return None
            cur.execute(
                """
                INSERT INTO daily_tasks(timesheet_id, task_date, project, type_of_work, description, hours,
                                        created_at, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(timesheet_id),
                    task.work_date,
                    task.project,
                    task.type_of_work,
                    task.description,
                    float(task.hours),
                    now,
                    now,
                ),
            )
            task_id = int(cur.lastrowid)
            self._touch(cur, timesheet_id=timesheet_id, now=now)

        return DailyTask(
            task_id=task_id,
            work_date=task.work_date,
            project=task.project,
            type_of_work=task.type_of_work,
            description=task.description,
            hours=float(task.hours),
            created_at=now,
            updated_at=now,
        )

    def update_task(self, *, user_id: int, timesheet_id: int, task_id: int, changes: dict) -> Optional[DailyTask]:
        unknown = set(changes) - set(_TASK_COLUMNS)
        if unknown:
            raise ValueError(f"Unsupported task fields: {sorted(unknown)}")

        now = now_utc()
        with db_cursor(self._conn_factory) as (_, cur):
            if not self._lock_owned(cur, user_id=user_id, timesheet_id=timesheet_id):
                return None
            if self._get_task(cur, timesheet_id=timesheet_id, task_id=task_id) is None:
                return None

            assignments = [f"{_TASK_COLUMNS[k]}=%s" for k in changes]
            params = [changes[k] for k in changes]
            assignments.append("updated_at=%s")
            params.append(now)
            cur.execute(
                f"UPDATE daily_tasks SET {', '.join(assignments)} WHERE task_id=%s AND timesheet_id=%s",
                (*params, int(task_id), int(timesheet_id)),
            )
            self._touch(cur, timesheet_id=timesheet_id, now=now)
            return self._get_task(cur, timesheet_id=timesheet_id, task_id=task_id)

    def delete_task(self, *, user_id: int, timesheet_id: int, task_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if not self._lock_owned(cur, user_id=user_id, timesheet_id=timesheet_id):
                return False
            cur.execute(
                "DELETE FROM daily_tasks WHERE task_id=%s AND timesheet_id=%s",
                (int(task_id), int(timesheet_id)),
            )
            if cur.rowcount <= 0:
                return False
            self._touch(cur, timesheet_id=timesheet_id, now=now_utc())
            return True
