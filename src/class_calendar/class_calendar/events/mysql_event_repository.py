from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import EventType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_json, normalize_mysql_time, to_json
from .model import Event, EventDraft
from .repository import EventRepository

_COLUMNS = """
    event_id, title, event_type, event_date, event_time, subject, description,
    recurring, days_of_week, user_id, completed
"""


def _row_to_event(r: dict) -> Event:
    return Event(
        event_id=int(r["event_id"]),
        title=r["title"],
        event_type=EventType(r["event_type"]),
        event_date=r["event_date"],
        event_time=normalize_mysql_time(r.get("event_time")),
        subject=r.get("subject"),
        description=r.get("description"),
        recurring=bool(r["recurring"]),
        days_of_week=tuple(int(d) for d in (from_json(r.get("days_of_week")) or [])),
        user_id=int(r["user_id"]),
        completed=bool(r["completed"]),
    )


def _draft_params(draft: EventDraft) -> tuple:
    return (
        draft.title,
        draft.event_type.value,
        draft.event_date,
        draft.event_time,
        draft.subject,
        draft.description,
        1 if draft.recurring else 0,
        to_json(list(draft.days_of_week)),
        1 if draft.completed else 0,
    )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, event_id: int) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM events WHERE event_id=%s", (int(event_id),))
            r = fetchone(cur)
            return _row_to_event(r) if r else None

    def list_events(
        self,
        *,
        owner_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        event_type: Optional[EventType] = None,
    ) -> Sequence[Event]:
        clauses = ["1=1"]
        params: list[object] = []
        if owner_id is not None:
            clauses.append("user_id=%s")
            params.append(int(owner_id))
        if start is not None:
            clauses.append("event_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("event_date <= %s")
            params.append(end)
        if event_type is not None:
            clauses.append("event_type=%s")
            params.append(event_type.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM events WHERE {where} ORDER BY event_date ASC, event_time ASC",
                tuple(params),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def create(self, *, owner_id: int, draft: EventDraft) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO events(
                    title, event_type, event_date, event_time, subject, description,
                    recurring, days_of_week, completed, user_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                _draft_params(draft) + (int(owner_id),),
            )
            return int(cur.lastrowid)

    def replace(self, *, event_id: int, draft: EventDraft) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE events
                SET title=%s, event_type=%s, event_date=%s, event_time=%s, subject=%s,
                    description=%s, recurring=%s, days_of_week=%s, completed=%s
                WHERE event_id=%s
                """,
                _draft_params(draft) + (int(event_id),),
            )
            return cur.rowcount > 0

    def set_completed(self, *, event_id: int, completed: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE events SET completed=%s WHERE event_id=%s", (1 if completed else 0, int(event_id)))
            return cur.rowcount > 0

    def delete(self, *, event_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM events WHERE event_id=%s", (int(event_id),))
            return cur.rowcount > 0
