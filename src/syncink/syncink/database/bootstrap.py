"""Apply ``schema.sql`` to the configured MySQL database."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator, Optional

from .connection import DatabaseConnection, DBConfig

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from DB_CONFIG, not from the file.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on ``;``, ignoring quoted text and ``--`` comments."""
    current = []
    quote = None
    for line in sql.splitlines(keepends=True):
        if quote is None and line.lstrip().startswith("--"):
            continue
        i = 0
        while i < len(line):
            ch = line[i]
            if quote:
                current.append(ch)
                if ch == "\\" and i + 1 < len(line):
                    current.append(line[i + 1])
                    i += 1
                elif ch == quote:
                    quote = None
            elif ch in ("'", '"'):
                quote = ch
                current.append(ch)
            elif ch == ";":
                stmt = "".join(current).strip()
                if stmt:
                    yield stmt
                current = []
            else:
                current.append(ch)
            i += 1

    stmt = "".join(current).strip()
    if stmt:
        yield stmt


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: Optional[Path] = None) -> int:
    """Create the database if needed and run every schema statement.

    Returns the number of statements executed.
    """
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path or SCHEMA_PATH).read_text(encoding="utf-8"))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    executed = 0
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            executed += 1
        conn.commit()
    finally:
        conn.close()
    return executed


def list_tables(db_config: dict) -> list:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
    finally:
        conn.close()
