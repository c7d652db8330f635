from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date, round2
from ..common.validators import optional_text, parse_bool, require_int, require_int_range
from ..core.access import Caller, require_caller
from ..core.constants import MAX_PERIOD, MIN_PERIOD
from ..core.exceptions import DomainError, NotFoundError, StoreError, ValidationError
from ..subjects.repository import SubjectRepository
from .model import AttendanceRecord, AttendanceStats, BulkResult, RecordOutcome
from .repository import AttendanceRepository
from .stats.base import AttendanceStatsCalculator
from .stats.standard_calculator import StandardStatsCalculator

logger = logging.getLogger(__name__)

_UNSET = object()


class AttendanceService:
    """Use cases: attendance ledger (per-owner records) and absence statistics."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        subjects: SubjectRepository,
        *,
        calculator: Optional[AttendanceStatsCalculator] = None,
    ):
        self._attendance = attendance
        self._subjects = subjects
        self._calculator = calculator or StandardStatsCalculator()

    def record(
        self,
        caller: Optional[Caller],
        *,
        subject_id: Any,
        class_date: Any,
        period: Any,
        is_present: Any = False,
        notes: Optional[str] = None,
    ) -> RecordOutcome:
        caller = require_caller(caller)
        if subject_id in (None, "") or class_date in (None, "") or period in (None, ""):
            raise ValidationError("subject_id, date and period are required")

        subject_id = require_int(subject_id, "Subject id")
        class_date = parse_iso_date(class_date)
        period = require_int_range(period, "Period", MIN_PERIOD, MAX_PERIOD)

        subject = self._subjects.get_by_id(subject_id)
        if not subject:
            raise NotFoundError("Subject not found")
        if not subject.covers(class_date):
            raise ValidationError("The record date must fall within the semester period")

        existing = self._attendance.find_slot(
            user_id=caller.user_id, subject_id=subject_id, class_date=class_date, period=period
        )
        attendance_id = self._attendance.upsert(
            user_id=caller.user_id,
            subject_id=subject_id,
            class_date=class_date,
            period=period,
            is_present=bool(parse_bool(is_present)),
            notes=optional_text(notes, "Notes"),
        )
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise StoreError("Attendance record was not saved")
        return RecordOutcome(record=record, created=existing is None)

    def bulk_record(self, caller: Optional[Caller], records: Iterable[Mapping[str, Any]]) -> BulkResult:
        caller = require_caller(caller)
        if isinstance(records, (str, bytes, Mapping)) or not records:
            raise ValidationError("Provide a non-empty list of records")

        result = BulkResult()
        for item in records:
            try:
                if not isinstance(item, Mapping):
                    raise ValidationError("Each record must be an object")
                outcome = self.record(
                    caller,
                    subject_id=item.get("subject_id"),
                    class_date=item.get("date"),
                    period=item.get("period"),
                    is_present=item.get("is_present", False),
                    notes=item.get("notes"),
                )
                result.records.append(outcome.record)
            except DomainError as exc:
                result.errors.append({"record": item, "error": exc.kind, "message": str(exc)})

        if result.errors:
            logger.info(
                "bulk attendance for user %s: %d saved, %d failed",
                caller.user_id,
                result.processed,
                len(result.errors),
            )
        return result

    def stats(self, caller: Optional[Caller], subject_id: Any, *, today: Optional[date] = None) -> AttendanceStats:
        caller = require_caller(caller)
        subject = self._subjects.get_by_id(require_int(subject_id, "Subject id"))
        if not subject:
            raise NotFoundError("Subject not found")
        counts = self._attendance.count_for_subject(user_id=caller.user_id, subject_id=subject.subject_id)
        return self._calculator.compute(subject, counts, today=today or date.today())

    def all_stats(self, caller: Optional[Caller], *, today: Optional[date] = None) -> list[AttendanceStats]:
        """Stats for every subject the caller has records for: at-risk first, then lowest attendance."""
        caller = require_caller(caller)
        today = today or date.today()

        out: list[AttendanceStats] = []
        for subject_id in self._attendance.subject_ids_for_user(user_id=caller.user_id):
            subject = self._subjects.get_by_id(subject_id)
            if not subject:
                logger.warning("attendance of user %s references missing subject %s", caller.user_id, subject_id)
                continue
            counts = self._attendance.count_for_subject(user_id=caller.user_id, subject_id=subject_id)
            out.append(self._calculator.compute(subject, counts, today=today))

        out.sort(key=lambda s: (not s.is_at_risk, s.attendance_rate))
        return out

    def at_risk(self, caller: Optional[Caller], *, today: Optional[date] = None) -> list[AttendanceStats]:
        return [s for s in self.all_stats(caller, today=today) if s.is_at_risk]

    def summary(self, caller: Optional[Caller], *, today: Optional[date] = None) -> dict:
        stats = self.all_stats(caller, today=today)
        average = round2(sum(s.attendance_rate for s in stats) / len(stats)) if stats else 0
        return {
            "total_subjects": len(stats),
            "subjects_at_risk": sum(1 for s in stats if s.is_at_risk),
            "total_classes": sum(s.total_classes for s in stats),
            "total_absences": sum(s.absences for s in stats),
            "total_presences": sum(s.presences for s in stats),
            "average_attendance_rate": average,
            "subjects": [s.to_dict() for s in stats],
        }

    def history(
        self,
        caller: Optional[Caller],
        *,
        subject_id: Any = None,
        start: Any = None,
        end: Any = None,
        is_present: Optional[bool] = None,
    ) -> Sequence[AttendanceRecord]:
        caller = require_caller(caller)
        return self._attendance.list_for_user(
            user_id=caller.user_id,
            subject_id=require_int(subject_id, "Subject id") if subject_id not in (None, "") else None,
            start=parse_iso_date(start) if start else None,
            end=parse_iso_date(end) if end else None,
            is_present=is_present,
        )

    def _get_owned(self, caller: Caller, attendance_id: Any) -> AttendanceRecord:
        # Another user's record answers exactly like a missing one.
        record = self._attendance.get_by_id(require_int(attendance_id, "Record id"))
        if not record or record.user_id != caller.user_id:
            raise NotFoundError("Record not found")
        return record

    def update(
        self,
        caller: Optional[Caller],
        attendance_id: Any,
        *,
        is_present: Optional[bool] = None,
        notes: Any = _UNSET,
    ) -> AttendanceRecord:
        caller = require_caller(caller)
        record = self._get_owned(caller, attendance_id)

        new_present = record.is_present if is_present is None else bool(parse_bool(is_present))
        new_notes = record.notes if notes is _UNSET else optional_text(notes, "Notes")
        self._attendance.update_record(
            attendance_id=record.attendance_id, is_present=new_present, notes=new_notes
        )
        return self._get_owned(caller, record.attendance_id)

    def delete(self, caller: Optional[Caller], attendance_id: Any) -> None:
        caller = require_caller(caller)
        record = self._get_owned(caller, attendance_id)
        if not self._attendance.delete(attendance_id=record.attendance_id):
            raise NotFoundError("Record not found")
