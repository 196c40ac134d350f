from __future__ import annotations

from datetime import date, time
from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id, normalize_mysql_time
from .model import Event
from .repository import EventRepository

_COLUMNS = {
    "name": "name",
    "event_date": "date",
    "event_time": "time",
    "location": "location",
    "custom_map_url": "custom_map_url",
}


def _row_to_event(r: dict) -> Event:
    return Event(
        event_id=str(r["id"]),
        name=r["name"],
        event_date=r["date"],
        event_time=normalize_mysql_time(r["time"]),
        location=r["location"],
        custom_map_url=r.get("custom_map_url"),
    )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, event_id: str) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, name, date, time, location, custom_map_url FROM events WHERE id=%s",
                (event_id,),
            )
            r = fetchone(cur)
            return _row_to_event(r) if r else None

    def list_all(self) -> Sequence[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, date, time, location, custom_map_url FROM events ORDER BY date ASC")
            return [_row_to_event(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        name: str,
        event_date: date,
        event_time: time,
        location: str,
        custom_map_url: Optional[str] = None,
    ) -> str:
        event_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO events(id, name, date, time, location, custom_map_url)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (event_id, name, event_date, event_time, location, custom_map_url),
            )
        return event_id

    def update(self, event_id: str, fields: Mapping[str, Any]) -> bool:
        sets = [(_COLUMNS[k], v) for k, v in fields.items() if k in _COLUMNS]
        if not sets:
            return False
        assignments = ", ".join(f"{col}=%s" for col, _ in sets)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE events SET {assignments} WHERE id=%s",
                tuple(v for _, v in sets) + (event_id,),
            )
            return cur.rowcount > 0

    def delete(self, event_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM events WHERE id=%s", (event_id,))
            return cur.rowcount > 0
