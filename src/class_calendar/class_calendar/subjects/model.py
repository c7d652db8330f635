from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.constants import DAY_NAMES, DEFAULT_SUBJECT_COLOR, MAX_ABSENCE_RATIO


@dataclass(frozen=True)
class ScheduleEntry:
    """Periods a subject takes on one day of the week (0 = Sunday)."""

    day_of_week: int
    periods: tuple[int, ...]

    def to_dict(self) -> dict:
        return {"day_of_week": self.day_of_week, "periods": list(self.periods)}


@dataclass(frozen=True)
class Subject:
    """Domain entity: a subject with its weekly grid and semester window."""

    subject_id: int
    name: str
    teacher: str
    schedule: tuple[ScheduleEntry, ...]
    semester_start_date: date
    semester_end_date: date
    total_classes: int
    user_id: int
    color: str = DEFAULT_SUBJECT_COLOR
    active: bool = True

    def covers(self, class_date: date) -> bool:
        return self.semester_start_date <= class_date <= self.semester_end_date

    def is_semester_active(self, today: Optional[date] = None) -> bool:
        return self.covers(today or date.today())

    def max_absences_allowed(self) -> int:
        return math.floor(self.total_classes * MAX_ABSENCE_RATIO)

    def periods_on(self, day_of_week: int) -> tuple[int, ...]:
        for entry in self.schedule:
            if entry.day_of_week == day_of_week:
                return entry.periods
        return ()

    def formatted_schedule(self) -> list[dict]:
        return [
            {
                "day": DAY_NAMES[e.day_of_week],
                "day_number": e.day_of_week,
                "periods": sorted(e.periods),
            }
            for e in self.schedule
        ]

    def slot_info(self) -> dict:
        """What a timetable cell shows for this subject."""
        return {
            "subject_id": self.subject_id,
            "name": self.name,
            "teacher": self.teacher,
            "color": self.color,
        }

    def to_dict(self) -> dict:
        return {
            "subject_id": self.subject_id,
            "name": self.name,
            "teacher": self.teacher,
            "color": self.color,
            "schedule": [e.to_dict() for e in self.schedule],
            "formatted_schedule": self.formatted_schedule(),
            "semester_start_date": self.semester_start_date.isoformat(),
            "semester_end_date": self.semester_end_date.isoformat(),
            "total_classes": self.total_classes,
            "max_absences_allowed": self.max_absences_allowed(),
            "user_id": self.user_id,
            "active": self.active,
        }


@dataclass(frozen=True)
class SubjectDraft:
    """Validated field values for creating or replacing a subject."""

    name: str
    teacher: str
    schedule: tuple[ScheduleEntry, ...]
    semester_start_date: date
    semester_end_date: date
    total_classes: int
    color: str = DEFAULT_SUBJECT_COLOR
    active: bool = True
