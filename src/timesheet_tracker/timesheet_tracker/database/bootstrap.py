from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator

from ..core.logging import get_logger
from .connection import DatabaseConnection

logger = get_logger(__name__)

# schema.sql names its own database for manual use; the configured one wins here.
_DATABASE_DIRECTIVES = re.compile(r"(?im)^[ \t]*(?:CREATE\s+DATABASE|USE)\b[^;]*;[ \t]*$")
_LINE_COMMENT = re.compile(r"(?m)^[ \t]*--.*$")

# Quoted literals are matched whole so a ';' inside them never ends a statement.
_SQL_TOKEN = re.compile(r"""'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|;|[^'";]+|['"]""", re.S)


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on top-level semicolons, yielding non-empty statements."""
    current: list[str] = []
    for token in _SQL_TOKEN.findall(sql):
        if token != ";":
            current.append(token)
            continue
        statement = "".join(current).strip()
        current = []
        if statement:
            yield statement

    statement = "".join(current).strip()
    if statement:
        yield statement


def load_schema_statements(schema_path: str | Path) -> list[str]:
    sql = Path(schema_path).read_text(encoding="utf-8")
    sql = _LINE_COMMENT.sub("", _DATABASE_DIRECTIVES.sub("", sql))
    return list(iter_sql_statements(sql))


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    name = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path) -> int:
    """Create the database if needed and run every statement of ``schema_path``.

    The DDL is idempotent, so this is safe on every startup. Returns the
    number of statements executed.
    """
    statements = load_schema_statements(schema_path)
    ensure_database_exists(conn_factory)

    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for statement in statements:
            cur.execute(statement)
        conn.commit()
    finally:
        conn.close()

    logger.info("Applied %d statements from %s to %s", len(statements), Path(schema_path).name, conn_factory.config.describe())
    return len(statements)


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
    finally:
        conn.close()
