from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceCounts, AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, user_id, subject_id, class_date, period, is_present, notes"


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        subject_id=int(r["subject_id"]),
        class_date=r["class_date"],
        period=int(r["period"]),
        is_present=bool(r["is_present"]),
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def find_slot(
        self,
        *,
        user_id: int,
        subject_id: int,
        class_date: date,
        period: int,
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND subject_id=%s AND class_date=%s AND period=%s
                """,
                (int(user_id), int(subject_id), class_date, int(period)),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def upsert(
        self,
        *,
        user_id: int,
        subject_id: int,
        class_date: date,
        period: int,
        is_present: bool,
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, subject_id, class_date, period, is_present, notes)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    attendance_id=LAST_INSERT_ID(attendance_id),
                    is_present=VALUES(is_present),
                    notes=VALUES(notes)
                """,
                (int(user_id), int(subject_id), class_date, int(period), 1 if is_present else 0, notes),
            )

            # LAST_INSERT_ID(attendance_id) exposes the existing id on update; fall back to the slot lookup.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                """
                SELECT attendance_id FROM attendance_records
                WHERE user_id=%s AND subject_id=%s AND class_date=%s AND period=%s
                """,
                (int(user_id), int(subject_id), class_date, int(period)),
            )
            r = fetchone(cur)
            return int(r["attendance_id"]) if r else 0

    def update_record(self, *, attendance_id: int, is_present: bool, notes: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET is_present=%s, notes=%s WHERE attendance_id=%s",
                (1 if is_present else 0, notes, int(attendance_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def list_for_user(
        self,
        *,
        user_id: int,
        subject_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        is_present: Optional[bool] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["user_id=%s"]
        params: list[object] = [int(user_id)]
        if subject_id is not None:
            clauses.append("subject_id=%s")
            params.append(int(subject_id))
        if start is not None:
            clauses.append("class_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("class_date <= %s")
            params.append(end)
        if is_present is not None:
            clauses.append("is_present=%s")
            params.append(1 if is_present else 0)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY class_date DESC, period ASC
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def count_for_subject(self, *, user_id: int, subject_id: int) -> AttendanceCounts:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total_registered,
                       COALESCE(SUM(is_present = 1), 0) AS presences,
                       COALESCE(SUM(is_present = 0), 0) AS absences
                FROM attendance_records
                WHERE user_id=%s AND subject_id=%s
                """,
                (int(user_id), int(subject_id)),
            )
            r = fetchone(cur) or {}
            return AttendanceCounts(
                total_registered=int(r.get("total_registered") or 0),
                presences=int(r.get("presences") or 0),
                absences=int(r.get("absences") or 0),
            )

    def subject_ids_for_user(self, *, user_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT DISTINCT subject_id FROM attendance_records WHERE user_id=%s ORDER BY subject_id",
                (int(user_id),),
            )
            return [int(r["subject_id"]) for r in fetchall(cur)]
