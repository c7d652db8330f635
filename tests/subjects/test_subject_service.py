import pytest

from src.class_calendar.class_calendar.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.class_calendar.class_calendar.subjects.validation import validate_schedule


def _payload(**overrides):
    data = {
        "name": "Linear Algebra",
        "teacher": "Dr. Ramos",
        "schedule": [{"day_of_week": 2, "periods": [1, 2]}, {"day_of_week": 4, "periods": [3]}],
        "semester_start_date": "2026-02-01",
        "semester_end_date": "2026-06-30",
        "total_classes": 32,
    }
    data.update(overrides)
    return data


def test_schedule_with_repeated_day_is_rejected():
    with pytest.raises(ValidationError, match="same day"):
        validate_schedule([{"day_of_week": 2, "periods": [1]}, {"day_of_week": 2, "periods": [3]}])


@pytest.mark.parametrize(
    "schedule",
    [
        [{"day_of_week": 7, "periods": [1]}],
        [{"day_of_week": -1, "periods": [1]}],
        [{"day_of_week": 1, "periods": []}],
        [{"day_of_week": 1, "periods": [0]}],
        [{"day_of_week": 1, "periods": [6]}],
    ],
)
def test_schedule_bounds(schedule):
    with pytest.raises(ValidationError):
        validate_schedule(schedule)


def test_create_applies_defaults(subject_service, admin):
    subject = subject_service.create(admin, _payload())

    assert subject.user_id == admin.user_id
    assert subject.color == "#3b82f6"
    assert subject.active is True
    assert subject.max_absences_allowed() == 8
    assert subject.formatted_schedule()[0] == {"day": "Tuesday", "day_number": 2, "periods": [1, 2]}


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": ""},
        {"teacher": "  "},
        {"semester_end_date": "2026-02-01"},
        {"total_classes": 0},
        {"total_classes": 2.5},
        {"schedule": 5},
        {"schedule": [{"day_of_week": 1, "periods": 3}]},
        {"color": 123},
        {"name": ["Physics"]},
    ],
)
def test_create_validation(subject_service, admin, overrides):
    with pytest.raises(ValidationError):
        subject_service.create(admin, _payload(**overrides))


def test_students_cannot_write(subject_service, student):
    with pytest.raises(AuthorizationError):
        subject_service.create(student, _payload())
    with pytest.raises(AuthenticationError):
        subject_service.create(None, _payload())


def test_listing_scope(subject_service, subjects_repo, admin, other_admin, student):
    subjects_repo.add(name="Zoology", user_id=admin.user_id)
    subjects_repo.add(name="Anatomy", user_id=other_admin.user_id, active=False)

    assert [s.name for s in subject_service.list_subjects(admin)] == ["Zoology"]
    assert [s.name for s in subject_service.list_subjects(student)] == ["Anatomy", "Zoology"]
    assert [s.name for s in subject_service.list_subjects(None, active=True)] == ["Zoology"]


def test_admin_cannot_read_foreign_subject(subject_service, subjects_repo, admin, other_admin, student):
    foreign = subjects_repo.add(user_id=other_admin.user_id)

    with pytest.raises(AuthorizationError):
        subject_service.get(admin, foreign.subject_id)
    assert subject_service.get(student, foreign.subject_id) == foreign
    assert subject_service.get(None, foreign.subject_id) == foreign


def test_non_owner_mutations_look_missing(subject_service, subjects_repo, admin, other_admin):
    foreign = subjects_repo.add(user_id=other_admin.user_id)

    with pytest.raises(NotFoundError):
        subject_service.update(admin, foreign.subject_id, {"name": "Hijacked"})
    with pytest.raises(NotFoundError):
        subject_service.toggle_active(admin, foreign.subject_id)
    with pytest.raises(NotFoundError):
        subject_service.delete(admin, foreign.subject_id)


def test_update_merges_and_revalidates(subject_service, admin):
    subject = subject_service.create(admin, _payload())

    updated = subject_service.update(admin, subject.subject_id, {"teacher": "Dr. Lima", "color": "#ff0000"})
    assert updated.teacher == "Dr. Lima"
    assert updated.color == "#ff0000"
    assert updated.name == "Linear Algebra"

    with pytest.raises(ValidationError):
        subject_service.update(admin, subject.subject_id, {"schedule": [{"day_of_week": 1, "periods": [9]}]})


def test_toggle_active_flips(subject_service, admin):
    subject = subject_service.create(admin, _payload())

    assert subject_service.toggle_active(admin, subject.subject_id).active is False
    assert subject_service.toggle_active(admin, subject.subject_id).active is True


def test_week_and_day_schedule(subject_service, subjects_repo, admin):
    subject = subject_service.create(admin, _payload())
    subjects_repo.add(name="Retired", user_id=admin.user_id, active=False)

    week = subject_service.week_schedule(admin)
    assert set(week) == {0, 1, 2, 3, 4, 5, 6}
    assert week[2][1] == [subject.slot_info()]
    assert week[4][3][0]["name"] == "Linear Algebra"
    assert week[1] == {}

    assert subject_service.day_schedule(admin, "2") == week[2]
    with pytest.raises(ValidationError):
        subject_service.day_schedule(admin, 7)


@pytest.mark.parametrize("raw, expected", [("false", False), ("true", True), (0, False), (None, True)])
def test_create_reads_active_flag(subject_service, admin, raw, expected):
    subject = subject_service.create(admin, _payload(active=raw))

    assert subject.active is expected
