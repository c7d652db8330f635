from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import SuggestionKind, SuggestionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_json, to_json
from .model import AdminResponse, EventSuggestion
from .repository import SuggestionRepository

_COLUMNS = """
    suggestion_id, user_id, event_id, kind, payload, original_data, reason, status,
    response_message, responded_at, responded_by, created_at, updated_at
"""


def _row_to_suggestion(r: dict) -> EventSuggestion:
    response = None
    if r.get("responded_at") is not None:
        response = AdminResponse(
            message=r.get("response_message") or "",
            responded_at=r["responded_at"],
            responded_by=int(r["responded_by"]) if r.get("responded_by") is not None else 0,
        )
    return EventSuggestion(
        suggestion_id=int(r["suggestion_id"]),
        user_id=int(r["user_id"]),
        event_id=int(r["event_id"]) if r.get("event_id") is not None else None,
        kind=SuggestionKind(r["kind"]),
        payload=from_json(r.get("payload")),
        original_data=from_json(r.get("original_data")),
        reason=r["reason"],
        status=SuggestionStatus(r["status"]),
        admin_response=response,
        created_at=r["created_at"],
        updated_at=r.get("updated_at"),
    )


class MySQLSuggestionRepository(SuggestionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        kind: SuggestionKind,
        event_id: Optional[int],
        payload: Optional[dict],
        original_data: Optional[dict],
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO event_suggestions(user_id, event_id, kind, payload, original_data, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    int(event_id) if event_id is not None else None,
                    kind.value,
                    to_json(payload),
                    to_json(original_data),
                    reason,
                    SuggestionStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, suggestion_id: int) -> Optional[EventSuggestion]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM event_suggestions WHERE suggestion_id=%s", (int(suggestion_id),))
            r = fetchone(cur)
            return _row_to_suggestion(r) if r else None

    def list_suggestions(
        self,
        *,
        status: Optional[SuggestionStatus] = None,
        kind: Optional[SuggestionKind] = None,
        user_id: Optional[int] = None,
        oldest_first: bool = False,
    ) -> Sequence[EventSuggestion]:
        clauses = ["1=1"]
        params: list[object] = []
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if kind is not None:
            clauses.append("kind=%s")
            params.append(kind.value)
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)
        order = "ASC" if oldest_first else "DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM event_suggestions
                WHERE {where}
                ORDER BY created_at {order}, suggestion_id {order}
                """,
                tuple(params),
            )
            return [_row_to_suggestion(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        suggestion_id: int,
        status: SuggestionStatus,
        message: str,
        responded_by: int,
        responded_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE event_suggestions
                SET status=%s, response_message=%s, responded_by=%s, responded_at=%s
                WHERE suggestion_id=%s AND status=%s
                """,
                (
                    status.value,
                    message,
                    int(responded_by),
                    responded_at,
                    int(suggestion_id),
                    SuggestionStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def delete_pending(self, *, suggestion_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM event_suggestions WHERE suggestion_id=%s AND status=%s",
                (int(suggestion_id), SuggestionStatus.PENDING.value),
            )
            return cur.rowcount > 0
