from datetime import date

from src.class_calendar.class_calendar.attendance.model import AttendanceCounts
from src.class_calendar.class_calendar.attendance.stats.standard_calculator import StandardStatsCalculator
from src.class_calendar.class_calendar.subjects.model import ScheduleEntry, Subject


def _subject(total_classes: int) -> Subject:
    return Subject(
        subject_id=1,
        name="Physics",
        teacher="Dr. Costa",
        schedule=(ScheduleEntry(day_of_week=2, periods=(3,)),),
        semester_start_date=date(2026, 2, 1),
        semester_end_date=date(2026, 6, 30),
        total_classes=total_classes,
        user_id=1,
    )


def test_six_absences_out_of_twenty_is_at_risk():
    stats = StandardStatsCalculator().compute(
        _subject(20),
        AttendanceCounts(total_registered=10, presences=4, absences=6),
        today=date(2026, 3, 1),
    )

    assert stats.max_absences_allowed == 5
    assert stats.is_at_risk is True
    assert stats.remaining_absences == 0
    assert stats.attendance_rate == 20.0
    assert stats.absence_rate == 30.0
    assert stats.registered_rate == 50.0
    assert stats.classes_remaining == 10
    assert stats.is_semester_active is True


def test_absences_at_the_limit_are_not_at_risk():
    stats = StandardStatsCalculator().compute(
        _subject(20),
        AttendanceCounts(total_registered=5, presences=0, absences=5),
        today=date(2026, 3, 1),
    )

    assert stats.is_at_risk is False
    assert stats.remaining_absences == 0


def test_zero_total_classes_gives_zero_rates():
    stats = StandardStatsCalculator().compute(
        _subject(0),
        AttendanceCounts(total_registered=2, presences=1, absences=1),
        today=date(2026, 3, 1),
    )

    assert stats.attendance_rate == 0
    assert stats.absence_rate == 0
    assert stats.registered_rate == 0
    assert stats.is_at_risk is False
    assert stats.classes_remaining == 0


def test_rates_round_half_up():
    # 1/8 = 12.5%, 1/3 = 33.333..%
    stats = StandardStatsCalculator().compute(
        _subject(3),
        AttendanceCounts(total_registered=1, presences=1, absences=0),
        today=date(2026, 7, 1),
    )

    assert stats.attendance_rate == 33.33
    assert stats.is_semester_active is False
