from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id, normalize_mysql_time
from .model import EDITABLE_FIELDS, NewSignup, Signup
from .repository import SignupRepository

_SELECT = """
    SELECT s.id, s.position_id, s.volunteer_name, s.phone_number, s.start_time, s.end_time,
           s.arrived, s.organization, s.other_notes
    FROM volunteer_signups s
"""


def _row_to_signup(r: dict) -> Signup:
    return Signup(
        signup_id=str(r["id"]),
        position_id=str(r["position_id"]),
        volunteer_name=r["volunteer_name"],
        phone_number=r["phone_number"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        arrived=bool(r.get("arrived")),
        organization=r.get("organization"),
        other_notes=r.get("other_notes"),
    )


class MySQLSignupRepository(SignupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, signup_id: str) -> Optional[Signup]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE s.id=%s", (signup_id,))
            r = fetchone(cur)
            return _row_to_signup(r) if r else None

    def list_for_position(self, position_id: str, *, arrived: Optional[bool] = None) -> Sequence[Signup]:
        clauses = ["s.position_id=%s"]
        params: list[object] = [position_id]
        if arrived is not None:
            clauses.append("s.arrived=%s")
            params.append(bool(arrived))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY s.start_time ASC",
                tuple(params),
            )
            return [_row_to_signup(r) for r in fetchall(cur)]

    def list_for_event(self, event_id: str) -> Sequence[Signup]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                JOIN volunteer_positions p ON p.id = s.position_id
                WHERE p.event_id=%s
                ORDER BY s.start_time ASC
                """,
                (event_id,),
            )
            return [_row_to_signup(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Signup]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY s.start_time ASC")
            return [_row_to_signup(r) for r in fetchall(cur)]

    def insert(self, signup: NewSignup) -> str:
        signup_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO volunteer_signups(
                    id, position_id, volunteer_name, phone_number, start_time, end_time,
                    arrived, organization, other_notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,0,%s,%s)
                """,
                (
                    signup_id,
                    signup.position_id,
                    signup.volunteer_name,
                    signup.phone_number,
                    signup.start_time,
                    signup.end_time,
                    signup.organization,
                    signup.other_notes,
                ),
            )
        return signup_id

    def update(self, signup_id: str, fields: Mapping[str, Any]) -> bool:
        sets = [(k, v) for k, v in fields.items() if k in EDITABLE_FIELDS]
        if not sets:
            return self.get_by_id(signup_id) is not None
        assignments = ", ".join(f"{col}=%s" for col, _ in sets)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE volunteer_signups SET {assignments} WHERE id=%s",
                tuple(v for _, v in sets) + (signup_id,),
            )
            return cur.rowcount > 0

    def update_arrival(self, signup_id: str, arrived: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE volunteer_signups SET arrived=%s WHERE id=%s", (bool(arrived), signup_id))
            return cur.rowcount > 0

    def delete(self, signup_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM volunteer_signups WHERE id=%s", (signup_id,))
            return cur.rowcount > 0
