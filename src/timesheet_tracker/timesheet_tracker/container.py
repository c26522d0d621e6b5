from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .core.constants import DEFAULT_PAGE_SIZE, DEFAULT_TOKEN_TTL_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .timesheets.mysql_timesheet_repository import MySQLTimesheetRepository
from .timesheets.repository import TimesheetRepository
from .timesheets.service import TimesheetService
from .users.guard import AccessGuard
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .users.tokens import TokenService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    timesheets_repo: TimesheetRepository

    token_service: TokenService
    auth_service: AuthService
    user_service: UserService
    access_guard: AccessGuard
    timesheet_service: TimesheetService


def wire_services(
    *,
    users_repo: UserRepository,
    timesheets_repo: TimesheetRepository,
    secret_key: str,
    token_ttl: timedelta = timedelta(days=DEFAULT_TOKEN_TTL_DAYS),
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Container:
    token_service = TokenService(secret_key, ttl=token_ttl)
    auth_service = AuthService(users_repo, token_service)

    return Container(
        users_repo=users_repo,
        timesheets_repo=timesheets_repo,
        token_service=token_service,
        auth_service=auth_service,
        user_service=UserService(users_repo),
        access_guard=AccessGuard(auth_service),
        timesheet_service=TimesheetService(timesheets_repo, default_page_size=page_size),
    )


def build_container(
    *,
    db_config: dict,
    secret_key: str,
    token_ttl: timedelta = timedelta(days=DEFAULT_TOKEN_TTL_DAYS),
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire_services(
        users_repo=MySQLUserRepository(conn),
        timesheets_repo=MySQLTimesheetRepository(conn),
        secret_key=secret_key,
        token_ttl=token_ttl,
        page_size=page_size,
    )
