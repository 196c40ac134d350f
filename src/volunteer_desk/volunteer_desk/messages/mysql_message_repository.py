from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import MessageStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id, placeholders
from .model import Message
from .repository import MessageRepository

_SELECT = """
    SELECT id, title, content, position_id, event_id, status, volunteer_id, phone_number, created_at
    FROM messages
"""


def _row_to_message(r: dict) -> Message:
    return Message(
        message_id=str(r["id"]),
        title=r["title"],
        content=r["content"],
        position_id=str(r["position_id"]),
        event_id=str(r["event_id"]),
        status=MessageStatus(r["status"]),
        volunteer_id=r.get("volunteer_id"),
        phone_number=r.get("phone_number"),
        created_at=r.get("created_at"),
    )


class MySQLMessageRepository(MessageRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, message_id: str) -> Optional[Message]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE id=%s", (message_id,))
            r = fetchone(cur)
            return _row_to_message(r) if r else None

    def create(
        self,
        *,
        title: str,
        content: str,
        position_id: str,
        event_id: str,
        volunteer_id: Optional[str],
        phone_number: Optional[str],
    ) -> str:
        message_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO messages(id, title, content, position_id, event_id, status, volunteer_id, phone_number)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    message_id,
                    title,
                    content,
                    position_id,
                    event_id,
                    MessageStatus.PENDING.value,
                    volunteer_id,
                    phone_number,
                ),
            )
        return message_id

    def list_by_status(
        self,
        statuses: Sequence[MessageStatus],
        *,
        event_id: Optional[str] = None,
    ) -> Sequence[Message]:
        if not statuses:
            return []
        clauses = [f"status IN ({placeholders(statuses)})"]
        params: list[object] = [s.value for s in statuses]
        if event_id is not None:
            clauses.append("event_id=%s")
            params.append(event_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY created_at DESC",
                tuple(params),
            )
            return [_row_to_message(r) for r in fetchall(cur)]

    def update_status(self, message_id: str, status: MessageStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE messages SET status=%s WHERE id=%s", (status.value, message_id))
            return cur.rowcount > 0
