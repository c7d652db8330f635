from __future__ import annotations

from datetime import date

from ...common.datetime_utils import round2
from ...subjects.model import Subject
from ..model import AttendanceCounts, AttendanceStats
from .base import AttendanceStatsCalculator


def _percent(part: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round2(part / total * 100)


class StandardStatsCalculator(AttendanceStatsCalculator):
    """Standard rule: rates over the declared total classes, at risk above 25% absences.

    A subject declaring no classes yields zero rates and is never at risk.
    """

    def compute(self, subject: Subject, counts: AttendanceCounts, *, today: date) -> AttendanceStats:
        total_classes = int(subject.total_classes)
        max_absences = subject.max_absences_allowed()

        return AttendanceStats(
            subject_id=subject.subject_id,
            subject_name=subject.name,
            subject_color=subject.color,
            total_classes=total_classes,
            total_registered=counts.total_registered,
            classes_remaining=max(0, total_classes - counts.total_registered),
            absences=counts.absences,
            presences=counts.presences,
            attendance_rate=_percent(counts.presences, total_classes),
            absence_rate=_percent(counts.absences, total_classes),
            registered_rate=_percent(counts.total_registered, total_classes),
            max_absences_allowed=max_absences,
            remaining_absences=max(0, max_absences - counts.absences),
            is_at_risk=total_classes > 0 and counts.absences > max_absences,
            semester_start_date=subject.semester_start_date,
            semester_end_date=subject.semester_end_date,
            is_semester_active=subject.is_semester_active(today),
        )
