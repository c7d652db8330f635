from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceCounts, AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_slot(
        self,
        *,
        user_id: int,
        subject_id: int,
        class_date: date,
        period: int,
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

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
        """Insert, or overwrite is_present/notes of the record in the same slot."""

        raise NotImplementedError

    def update_record(self, *, attendance_id: int, is_present: bool, notes: Optional[str]) -> bool:
        raise NotImplementedError

    def delete(self, *, attendance_id: int) -> bool:
        raise NotImplementedError

    def list_for_user(
        self,
        *,
        user_id: int,
        subject_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        is_present: Optional[bool] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records sorted by date descending, then period ascending."""

        raise NotImplementedError

    def count_for_subject(self, *, user_id: int, subject_id: int) -> AttendanceCounts:
        raise NotImplementedError

    def subject_ids_for_user(self, *, user_id: int) -> Sequence[int]:
        raise NotImplementedError
