from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[4] / "database" / "schema.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted literals and ``--`` comments."""
    buf: list[str] = []
    quote: str | None = None
    escape = False
    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]

    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue
        if ch == "\\":
            buf.append(ch)
            escape = True
            continue
        if ch in ("'", '"'):
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
            buf.append(ch)
            continue
        if ch == ";" and quote is None:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn_factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    conn_factory = DatabaseConnection(DBConfig.from_settings(db_config))
    ensure_database_exists(conn_factory)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied schema %s to %s", schema_path, conn_factory.config.database)


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_settings(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


VOLUNTEER_TABLES = ("events", "volunteer_positions", "volunteer_signups", "messages")


def count_rows(db_config: dict, tables: Iterable[str] = VOLUNTEER_TABLES) -> dict[str, int]:
    conn = DatabaseConnection(DBConfig.from_settings(db_config)).connect()
    try:
        cur = conn.cursor()
        counts = {}
        for table in tables:
            cur.execute(f"SELECT COUNT(*) FROM `{table}`")
            counts[table] = int(cur.fetchone()[0])
        return counts
    finally:
        conn.close()


def staffing_totals(db_config: dict) -> tuple[int, int]:
    """(filled, needed) summed over every volunteer position."""
    conn = DatabaseConnection(DBConfig.from_settings(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SELECT COALESCE(SUM(filled), 0), COALESCE(SUM(needed), 0) FROM volunteer_positions")
        filled, needed = cur.fetchone()
        return int(filled), int(needed)
    finally:
        conn.close()


def describe_database(counts: dict[str, int], filled: int, needed: int) -> list[str]:
    lines = [f"  {table:<20} {count:>6} rows" for table, count in counts.items()]
    if needed:
        lines.append(f"  staffing             {filled}/{needed} slots filled ({max(0, needed - filled)} open)")
    else:
        lines.append("  staffing             no positions yet")
    return lines
