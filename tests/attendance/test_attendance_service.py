from datetime import date

import pytest

from src.class_calendar.class_calendar.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    ValidationError,
)


def test_record_twice_on_same_slot_overwrites(attendance_service, attendance_repo, subjects_repo, student):
    subject = subjects_repo.add()

    first = attendance_service.record(student, subject_id=subject.subject_id, class_date="2026-03-02", period=1)
    second = attendance_service.record(
        student,
        subject_id=subject.subject_id,
        class_date="2026-03-02",
        period=1,
        is_present=True,
        notes="arrived late",
    )

    assert first.created is True
    assert second.created is False
    assert second.record.attendance_id == first.record.attendance_id
    assert len(attendance_repo.items) == 1
    assert second.record.is_present is True
    assert second.record.notes == "arrived late"


def test_record_defaults_to_absent(attendance_service, subjects_repo, student):
    subject = subjects_repo.add()

    outcome = attendance_service.record(student, subject_id=subject.subject_id, class_date="2026-03-02", period=2)

    assert outcome.record.is_present is False
    assert outcome.record.class_date == date(2026, 3, 2)


def test_record_outside_semester_is_rejected(attendance_service, subjects_repo, student):
    subject = subjects_repo.add()

    with pytest.raises(ValidationError, match="semester"):
        attendance_service.record(student, subject_id=subject.subject_id, class_date="2026-07-15", period=1)


@pytest.mark.parametrize("period", [0, 6, "x"])
def test_record_rejects_period_outside_range(attendance_service, subjects_repo, student, period):
    subject = subjects_repo.add()

    with pytest.raises(ValidationError):
        attendance_service.record(student, subject_id=subject.subject_id, class_date="2026-03-02", period=period)


def test_record_unknown_subject(attendance_service, student):
    with pytest.raises(NotFoundError):
        attendance_service.record(student, subject_id=99, class_date="2026-03-02", period=1)


def test_record_requires_caller(attendance_service, subjects_repo):
    subject = subjects_repo.add()

    with pytest.raises(AuthenticationError):
        attendance_service.record(None, subject_id=subject.subject_id, class_date="2026-03-02", period=1)


def test_bulk_collects_failures_without_rollback(attendance_service, attendance_repo, subjects_repo, student):
    subject = subjects_repo.add()

    result = attendance_service.bulk_record(
        student,
        [
            {"subject_id": subject.subject_id, "date": "2026-03-02", "period": 1, "is_present": True},
            {"subject_id": subject.subject_id, "date": "2027-01-01", "period": 1},
            {"subject_id": 42, "date": "2026-03-02", "period": 1},
            {"subject_id": subject.subject_id, "date": "2026-03-03", "period": 2},
        ],
    )

    assert result.processed == 2
    assert len(attendance_repo.items) == 2
    assert [e["error"] for e in result.errors] == ["validation_error", "not_found"]
    assert result.to_dict()["failed"] == 2


def test_bulk_rejects_empty_list(attendance_service, student):
    with pytest.raises(ValidationError):
        attendance_service.bulk_record(student, [])


def test_all_stats_puts_at_risk_first_then_lowest_rate(attendance_service, subjects_repo, student):
    safe_high = subjects_repo.add(name="Art", total_classes=20)
    safe_low = subjects_repo.add(name="Biology", total_classes=20)
    risky = subjects_repo.add(name="Chemistry", total_classes=4)

    for day in (2, 3, 4):
        attendance_service.record(student, subject_id=safe_high.subject_id, class_date=f"2026-03-0{day}", period=1, is_present=True)
    attendance_service.record(student, subject_id=safe_low.subject_id, class_date="2026-03-02", period=1, is_present=True)
    for day in (2, 3):
        attendance_service.record(student, subject_id=risky.subject_id, class_date=f"2026-03-0{day}", period=1)

    stats = attendance_service.all_stats(student, today=date(2026, 3, 10))

    assert [s.subject_name for s in stats] == ["Chemistry", "Biology", "Art"]
    assert stats[0].is_at_risk is True
    assert [s.subject_name for s in attendance_service.at_risk(student, today=date(2026, 3, 10))] == ["Chemistry"]


def test_all_stats_only_covers_subjects_with_records(attendance_service, subjects_repo, student, other_student):
    mine = subjects_repo.add(name="Art")
    subjects_repo.add(name="Music")
    attendance_service.record(other_student, subject_id=mine.subject_id, class_date="2026-03-02", period=1)

    assert attendance_service.all_stats(student) == []
    assert [s.subject_name for s in attendance_service.all_stats(other_student)] == ["Art"]


def test_summary_aggregates(attendance_service, subjects_repo, student):
    a = subjects_repo.add(name="Art", total_classes=10)
    b = subjects_repo.add(name="Biology", total_classes=4)
    attendance_service.record(student, subject_id=a.subject_id, class_date="2026-03-02", period=1, is_present=True)
    attendance_service.record(student, subject_id=b.subject_id, class_date="2026-03-02", period=1)
    attendance_service.record(student, subject_id=b.subject_id, class_date="2026-03-03", period=1)

    summary = attendance_service.summary(student, today=date(2026, 3, 10))

    assert summary["total_subjects"] == 2
    assert summary["subjects_at_risk"] == 1
    assert summary["total_classes"] == 14
    assert summary["total_absences"] == 2
    assert summary["total_presences"] == 1
    assert summary["average_attendance_rate"] == 5.0


def test_summary_without_records(attendance_service, student):
    summary = attendance_service.summary(student)

    assert summary["total_subjects"] == 0
    assert summary["average_attendance_rate"] == 0


def test_history_sorted_by_date_desc_then_period(attendance_service, subjects_repo, student):
    subject = subjects_repo.add()
    attendance_service.record(student, subject_id=subject.subject_id, class_date="2026-03-02", period=2)
    attendance_service.record(student, subject_id=subject.subject_id, class_date="2026-03-09", period=3)
    attendance_service.record(student, subject_id=subject.subject_id, class_date="2026-03-02", period=1, is_present=True)

    history = attendance_service.history(student, subject_id=subject.subject_id)
    assert [(r.class_date.day, r.period) for r in history] == [(9, 3), (2, 1), (2, 2)]

    absent_only = attendance_service.history(student, is_present=False, start="2026-03-01", end="2026-03-05")
    assert [(r.class_date.day, r.period) for r in absent_only] == [(2, 2)]


def test_update_and_delete_only_by_owner(attendance_service, subjects_repo, student, other_student):
    subject = subjects_repo.add()
    record = attendance_service.record(student, subject_id=subject.subject_id, class_date="2026-03-02", period=1).record

    with pytest.raises(NotFoundError):
        attendance_service.update(other_student, record.attendance_id, is_present=True)
    with pytest.raises(NotFoundError):
        attendance_service.delete(other_student, record.attendance_id)

    updated = attendance_service.update(student, record.attendance_id, is_present=True)
    assert updated.is_present is True
    assert updated.notes is None

    attendance_service.delete(student, record.attendance_id)
    with pytest.raises(NotFoundError):
        attendance_service.delete(student, record.attendance_id)
