from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from .connection import DatabaseConnection, DBConfig
from .mysql_base import db_cursor, fetchall

SCHEMA_PATH = Path(__file__).resolve().parents[4] / "database" / "schema.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes, skips '--' comments).
    buf: list[str] = []
    in_single = False
    in_double = False

    for line in sql.splitlines(keepends=True):
        if not in_single and not in_double and line.lstrip().startswith("--"):
            continue
        for ch in line:
            if ch == "'" and not in_double:
                in_single = not in_single
            elif ch == '"' and not in_single:
                in_double = not in_double
            elif ch == ";" and not in_single and not in_double:
                stmt = "".join(buf).strip()
                buf.clear()
                if stmt:
                    yield stmt
                continue
            buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    with db_cursor(DatabaseConnection(DBConfig.from_dict(db_config)), dictionary=False) as (_, cur):
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)


def list_tables(db_config: dict) -> list[str]:
    with db_cursor(DatabaseConnection(DBConfig.from_dict(db_config)), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in fetchall(cur)]
