from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from ...subjects.model import Subject
from ..model import AttendanceCounts, AttendanceStats


class AttendanceStatsCalculator(ABC):
    """Calculator interface (Strategy Pattern for attendance statistics)."""

    @abstractmethod
    def compute(self, subject: Subject, counts: AttendanceCounts, *, today: date) -> AttendanceStats:
        raise NotImplementedError
