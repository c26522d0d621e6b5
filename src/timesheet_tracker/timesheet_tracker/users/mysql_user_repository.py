from __future__ import annotations

from typing import Optional

from mysql.connector.errors import IntegrityError

from ..common.datetime_utils import now_utc
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "user_id, name, email, password_hash, active_token, created_at, updated_at"


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        active_token=row.get("active_token") or None,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE {where}", params)
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id=%s", (int(user_id),))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email=%s", (email,))

    def get_by_active_token(self, token: str) -> Optional[User]:
        return self._get_one("active_token=%s", (token,))

    def create_user(self, *, name: str, email: str, password_hash: str) -> int:
        now = now_utc()
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(name, email, password_hash, active_token, created_at, updated_at)
                    VALUES(%s,%s,%s,NULL,%s,%s)
                    """,
                    (name, email, password_hash, now, now),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("User with this email already exists") from e
            raise

    def set_active_token(self, user_id: int, token: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET active_token=%s, updated_at=%s WHERE user_id=%s",
                (token, now_utc(), int(user_id)),
            )
            return cur.rowcount > 0
