from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import Position
from .repository import PositionRepository

_SELECT = """
    SELECT id, event_id, name, needed, filled, latitude, longitude, description, skill_level
    FROM volunteer_positions
"""

_UPDATABLE = ("event_id", "name", "needed", "latitude", "longitude", "description", "skill_level")


def _row_to_position(r: dict) -> Position:
    return Position(
        position_id=str(r["id"]),
        event_id=str(r["event_id"]),
        name=r["name"],
        needed=int(r["needed"]),
        filled=int(r.get("filled") or 0),
        latitude=float(r["latitude"]) if r.get("latitude") is not None else None,
        longitude=float(r["longitude"]) if r.get("longitude") is not None else None,
        description=r.get("description"),
        skill_level=r.get("skill_level"),
    )


class MySQLPositionRepository(PositionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, position_id: str) -> Optional[Position]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE id=%s", (position_id,))
            r = fetchone(cur)
            return _row_to_position(r) if r else None

    def list_for_event(self, event_id: Optional[str] = None) -> Sequence[Position]:
        with db_cursor(self._conn_factory) as (_, cur):
            if event_id is None:
                cur.execute(_SELECT + " ORDER BY name ASC")
            else:
                cur.execute(_SELECT + " WHERE event_id=%s ORDER BY name ASC", (event_id,))
            return [_row_to_position(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        event_id: str,
        name: str,
        needed: int,
        latitude: Optional[float],
        longitude: Optional[float],
        description: Optional[str] = None,
        skill_level: Optional[str] = None,
    ) -> str:
        position_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO volunteer_positions(
                    id, event_id, name, needed, filled, latitude, longitude, description, skill_level
                )
                VALUES(%s,%s,%s,%s,0,%s,%s,%s,%s)
                """,
                (position_id, event_id, name, int(needed), latitude, longitude, description, skill_level),
            )
        return position_id

    def update(self, position_id: str, fields: Mapping[str, Any]) -> bool:
        sets = [(k, v) for k, v in fields.items() if k in _UPDATABLE]
        if not sets:
            return False
        assignments = ", ".join(f"{col}=%s" for col, _ in sets)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE volunteer_positions SET {assignments} WHERE id=%s",
                tuple(v for _, v in sets) + (position_id,),
            )
            return cur.rowcount > 0

    def delete(self, position_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM volunteer_positions WHERE id=%s", (position_id,))
            return cur.rowcount > 0

    def increment_filled_count(self, position_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE volunteer_positions SET filled = filled + 1 WHERE id=%s", (position_id,))

    def decrement_filled_count(self, position_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE volunteer_positions SET filled = GREATEST(0, filled - 1) WHERE id=%s",
                (position_id,),
            )

    def reset_filled_counts(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE volunteer_positions SET filled = 0")
            return int(cur.rowcount)
