from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_json, to_json
from .model import ScheduleEntry, Subject, SubjectDraft
from .repository import SubjectRepository

_COLUMNS = """
    subject_id, name, teacher, color, schedule, semester_start_date,
    semester_end_date, total_classes, user_id, active
"""


def _row_to_subject(r: dict) -> Subject:
    schedule = tuple(
        ScheduleEntry(day_of_week=int(s["day_of_week"]), periods=tuple(int(p) for p in s["periods"]))
        for s in (from_json(r.get("schedule")) or [])
    )
    return Subject(
        subject_id=int(r["subject_id"]),
        name=r["name"],
        teacher=r["teacher"],
        color=r["color"],
        schedule=schedule,
        semester_start_date=r["semester_start_date"],
        semester_end_date=r["semester_end_date"],
        total_classes=int(r["total_classes"]),
        user_id=int(r["user_id"]),
        active=bool(r["active"]),
    )


def _schedule_json(draft: SubjectDraft) -> str:
    return to_json([e.to_dict() for e in draft.schedule])


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM subjects WHERE subject_id=%s", (int(subject_id),))
            r = fetchone(cur)
            return _row_to_subject(r) if r else None

    def list_subjects(self, *, owner_id: Optional[int] = None, active: Optional[bool] = None) -> Sequence[Subject]:
        clauses = ["1=1"]
        params: list[object] = []
        if owner_id is not None:
            clauses.append("user_id=%s")
            params.append(int(owner_id))
        if active is not None:
            clauses.append("active=%s")
            params.append(1 if active else 0)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM subjects WHERE {where} ORDER BY name ASC", tuple(params))
            return [_row_to_subject(r) for r in fetchall(cur)]

    def create(self, *, owner_id: int, draft: SubjectDraft) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO subjects(
                    name, teacher, color, schedule, semester_start_date,
                    semester_end_date, total_classes, user_id, active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    draft.name,
                    draft.teacher,
                    draft.color,
                    _schedule_json(draft),
                    draft.semester_start_date,
                    draft.semester_end_date,
                    int(draft.total_classes),
                    int(owner_id),
                    1 if draft.active else 0,
                ),
            )
            return int(cur.lastrowid)

    def replace(self, *, subject_id: int, draft: SubjectDraft) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE subjects
                SET name=%s, teacher=%s, color=%s, schedule=%s, semester_start_date=%s,
                    semester_end_date=%s, total_classes=%s, active=%s
                WHERE subject_id=%s
                """,
                (
                    draft.name,
                    draft.teacher,
                    draft.color,
                    _schedule_json(draft),
                    draft.semester_start_date,
                    draft.semester_end_date,
                    int(draft.total_classes),
                    1 if draft.active else 0,
                    int(subject_id),
                ),
            )
            return cur.rowcount > 0

    def set_active(self, *, subject_id: int, active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE subjects SET active=%s WHERE subject_id=%s", (1 if active else 0, int(subject_id)))
            return cur.rowcount > 0

    def delete(self, *, subject_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM subjects WHERE subject_id=%s", (int(subject_id),))
            return cur.rowcount > 0
