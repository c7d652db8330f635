from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: presence or absence in one period of one class day."""

    attendance_id: int
    user_id: int
    subject_id: int
    class_date: date
    period: int
    is_present: bool
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "user_id": self.user_id,
            "subject_id": self.subject_id,
            "date": self.class_date.isoformat(),
            "period": self.period,
            "is_present": self.is_present,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class AttendanceCounts:
    """Aggregate of one user's records for one subject."""

    total_registered: int = 0
    presences: int = 0
    absences: int = 0


@dataclass(frozen=True)
class AttendanceStats:
    subject_id: int
    subject_name: str
    subject_color: str
    total_classes: int
    total_registered: int
    classes_remaining: int
    absences: int
    presences: int
    attendance_rate: float
    absence_rate: float
    registered_rate: float
    max_absences_allowed: int
    remaining_absences: int
    is_at_risk: bool
    semester_start_date: date
    semester_end_date: date
    is_semester_active: bool

    def to_dict(self) -> dict:
        return {
            "subject_id": self.subject_id,
            "subject_name": self.subject_name,
            "subject_color": self.subject_color,
            "total_classes": self.total_classes,
            "total_registered": self.total_registered,
            "classes_remaining": self.classes_remaining,
            "absences": self.absences,
            "presences": self.presences,
            "attendance_rate": self.attendance_rate,
            "absence_rate": self.absence_rate,
            "registered_rate": self.registered_rate,
            "max_absences_allowed": self.max_absences_allowed,
            "remaining_absences": self.remaining_absences,
            "is_at_risk": self.is_at_risk,
            "semester_start_date": self.semester_start_date.isoformat(),
            "semester_end_date": self.semester_end_date.isoformat(),
            "is_semester_active": self.is_semester_active,
        }


@dataclass(frozen=True)
class RecordOutcome:
    record: AttendanceRecord
    created: bool


@dataclass
class BulkResult:
    """Outcome of a bulk upsert. Entries fail independently, nothing is rolled back."""

    records: list[AttendanceRecord] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.records)

    def to_dict(self) -> dict:
        return {
            "processed": self.processed,
            "failed": len(self.errors),
            "records": [r.to_dict() for r in self.records],
            "errors": list(self.errors),
        }
