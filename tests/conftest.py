from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta

import pytest

from src.class_calendar.class_calendar.attendance.model import AttendanceCounts, AttendanceRecord
from src.class_calendar.class_calendar.attendance.service import AttendanceService
from src.class_calendar.class_calendar.core.access import Caller
from src.class_calendar.class_calendar.core.enums import EventType, Role, SuggestionStatus
from src.class_calendar.class_calendar.core.exceptions import NotifierError, StoreError
from src.class_calendar.class_calendar.events.model import Event
from src.class_calendar.class_calendar.events.service import EventService
from src.class_calendar.class_calendar.subjects.model import ScheduleEntry, Subject
from src.class_calendar.class_calendar.subjects.service import SubjectService
from src.class_calendar.class_calendar.suggestions.model import AdminResponse, EventSuggestion
from src.class_calendar.class_calendar.suggestions.service import SuggestionService
from src.class_calendar.class_calendar.users.model import User

FIXED_NOW = datetime(2026, 3, 10, 9, 0, 0)


class FakeSubjectsRepo:
    def __init__(self):
        self._next_id = 1
        self.items: dict[int, Subject] = {}

    def add(self, **overrides) -> Subject:
        data = dict(
            subject_id=self._next_id,
            name="Calculus",
            teacher="Dr. Silva",
            schedule=(ScheduleEntry(day_of_week=1, periods=(1, 2)),),
            semester_start_date=date(2026, 2, 1),
            semester_end_date=date(2026, 6, 30),
            total_classes=20,
            user_id=1,
        )
        data.update(overrides)
        subject = Subject(**data)
        self.items[subject.subject_id] = subject
        self._next_id = max(self._next_id, subject.subject_id) + 1
        return subject

    def get_by_id(self, subject_id):
        return self.items.get(int(subject_id))

    def list_subjects(self, *, owner_id=None, active=None):
        out = [
            s
            for s in self.items.values()
            if (owner_id is None or s.user_id == owner_id) and (active is None or s.active == active)
        ]
        return sorted(out, key=lambda s: s.name)

    def create(self, *, owner_id, draft):
        subject = self.add(
            subject_id=self._next_id,
            name=draft.name,
            teacher=draft.teacher,
            schedule=draft.schedule,
            semester_start_date=draft.semester_start_date,
            semester_end_date=draft.semester_end_date,
            total_classes=draft.total_classes,
            user_id=owner_id,
            color=draft.color,
            active=draft.active,
        )
        return subject.subject_id

    def replace(self, *, subject_id, draft):
        current = self.items.get(int(subject_id))
        if not current:
            return False
        self.items[current.subject_id] = replace(
            current,
            name=draft.name,
            teacher=draft.teacher,
            schedule=draft.schedule,
            semester_start_date=draft.semester_start_date,
            semester_end_date=draft.semester_end_date,
            total_classes=draft.total_classes,
            color=draft.color,
            active=draft.active,
        )
        return True

    def set_active(self, *, subject_id, active):
        current = self.items.get(int(subject_id))
        if not current:
            return False
        self.items[current.subject_id] = replace(current, active=active)
        return True

    def delete(self, *, subject_id):
        return self.items.pop(int(subject_id), None) is not None


class FakeAttendanceRepo:
    def __init__(self):
        self._next_id = 1
        self.items: dict[int, AttendanceRecord] = {}

    def get_by_id(self, attendance_id):
        return self.items.get(int(attendance_id))

    def find_slot(self, *, user_id, subject_id, class_date, period):
        for r in self.items.values():
            if (r.user_id, r.subject_id, r.class_date, r.period) == (user_id, subject_id, class_date, period):
                return r
        return None

    def upsert(self, *, user_id, subject_id, class_date, period, is_present, notes=None):
        existing = self.find_slot(user_id=user_id, subject_id=subject_id, class_date=class_date, period=period)
        if existing:
            self.items[existing.attendance_id] = replace(existing, is_present=is_present, notes=notes)
            return existing.attendance_id
        rid = self._next_id
        self._next_id += 1
        self.items[rid] = AttendanceRecord(
            attendance_id=rid,
            user_id=user_id,
            subject_id=subject_id,
            class_date=class_date,
            period=period,
            is_present=is_present,
            notes=notes,
        )
        return rid

    def update_record(self, *, attendance_id, is_present, notes):
        current = self.items.get(int(attendance_id))
        if not current:
            return False
        self.items[current.attendance_id] = replace(current, is_present=is_present, notes=notes)
        return True

    def delete(self, *, attendance_id):
        return self.items.pop(int(attendance_id), None) is not None

    def list_for_user(self, *, user_id, subject_id=None, start=None, end=None, is_present=None):
        out = [
            r
            for r in self.items.values()
            if r.user_id == user_id
            and (subject_id is None or r.subject_id == subject_id)
            and (start is None or r.class_date >= start)
            and (end is None or r.class_date <= end)
            and (is_present is None or r.is_present == is_present)
        ]
        out.sort(key=lambda r: r.period)
        out.sort(key=lambda r: r.class_date, reverse=True)
        return out

    def count_for_subject(self, *, user_id, subject_id):
        rows = [r for r in self.items.values() if r.user_id == user_id and r.subject_id == subject_id]
        presences = sum(1 for r in rows if r.is_present)
        return AttendanceCounts(total_registered=len(rows), presences=presences, absences=len(rows) - presences)

    def subject_ids_for_user(self, *, user_id):
        return sorted({r.subject_id for r in self.items.values() if r.user_id == user_id})


class FakeEventsRepo:
    def __init__(self):
        self._next_id = 1
        self.items: dict[int, Event] = {}

    def add(self, **overrides) -> Event:
        data = dict(
            event_id=self._next_id,
            title="Calculus exam",
            event_type=EventType.EXAM,
            event_date=date(2026, 3, 20),
            user_id=1,
        )
        data.update(overrides)
        event = Event(**data)
        self.items[event.event_id] = event
        self._next_id = max(self._next_id, event.event_id) + 1
        return event

    def get_by_id(self, event_id):
        return self.items.get(int(event_id))

    def list_events(self, *, owner_id=None, start=None, end=None, event_type=None):
        out = [
            e
            for e in self.items.values()
            if (owner_id is None or e.user_id == owner_id)
            and (start is None or e.event_date >= start)
            and (end is None or e.event_date <= end)
            and (event_type is None or e.event_type == event_type)
        ]
        return sorted(out, key=lambda e: (e.event_date, e.event_time or ""))

    def create(self, *, owner_id, draft):
        event = self.add(
            event_id=self._next_id,
            title=draft.title,
            event_type=draft.event_type,
            event_date=draft.event_date,
            user_id=owner_id,
            event_time=draft.event_time,
            subject=draft.subject,
            description=draft.description,
            recurring=draft.recurring,
            days_of_week=draft.days_of_week,
            completed=draft.completed,
        )
        return event.event_id

    def replace(self, *, event_id, draft):
        current = self.items.get(int(event_id))
        if not current:
            return False
        self.items[current.event_id] = replace(
            current,
            title=draft.title,
            event_type=draft.event_type,
            event_date=draft.event_date,
            event_time=draft.event_time,
            subject=draft.subject,
            description=draft.description,
            recurring=draft.recurring,
            days_of_week=draft.days_of_week,
            completed=draft.completed,
        )
        return True

    def set_completed(self, *, event_id, completed):
        current = self.items.get(int(event_id))
        if not current:
            return False
        self.items[current.event_id] = replace(current, completed=completed)
        return True

    def delete(self, *, event_id):
        return self.items.pop(int(event_id), None) is not None


class FakeSuggestionsRepo:
    def __init__(self):
        self._next_id = 1
        self.items: dict[int, EventSuggestion] = {}
        self.fail_decide = False

    def create(self, *, user_id, kind, event_id, payload, original_data, reason):
        sid = self._next_id
        self._next_id += 1
        self.items[sid] = EventSuggestion(
            suggestion_id=sid,
            user_id=user_id,
            kind=kind,
            reason=reason,
            status=SuggestionStatus.PENDING,
            created_at=FIXED_NOW + timedelta(minutes=sid),
            event_id=event_id,
            payload=payload,
            original_data=original_data,
        )
        return sid

    def get_by_id(self, suggestion_id):
        return self.items.get(int(suggestion_id))

    def list_suggestions(self, *, status=None, kind=None, user_id=None, oldest_first=False):
        out = [
            s
            for s in self.items.values()
            if (status is None or s.status == status)
            and (kind is None or s.kind == kind)
            and (user_id is None or s.user_id == user_id)
        ]
        return sorted(out, key=lambda s: s.created_at, reverse=not oldest_first)

    def decide(self, *, suggestion_id, status, message, responded_by, responded_at):
        if self.fail_decide:
            raise StoreError("Database unavailable")
        current = self.items.get(int(suggestion_id))
        if not current or not current.is_pending:
            return False
        self.items[current.suggestion_id] = replace(
            current,
            status=status,
            admin_response=AdminResponse(message=message, responded_at=responded_at, responded_by=responded_by),
            updated_at=responded_at,
        )
        return True

    def delete_pending(self, *, suggestion_id):
        current = self.items.get(int(suggestion_id))
        if not current or not current.is_pending:
            return False
        del self.items[current.suggestion_id]
        return True


class FakeUsersRepo:
    def __init__(self):
        self._next_id = 1
        self.items: dict[int, User] = {}

    def add(self, **overrides) -> User:
        data = dict(
            user_id=self._next_id,
            email=f"user{self._next_id}@school.edu",
            name="Student",
            created_at=FIXED_NOW,
        )
        data.update(overrides)
        user = User(**data)
        self.items[user.user_id] = user
        self._next_id = max(self._next_id, user.user_id) + 1
        return user

    def get_by_id(self, user_id):
        return self.items.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self.items.values() if u.email == email), None)

    def get_by_verification_token(self, token_hash):
        return next((u for u in self.items.values() if u.verification_token == token_hash), None)

    def create(self, *, email, name, role=Role.STUDENT, is_verified=False):
        return self.add(user_id=self._next_id, email=email, name=name, role=role, is_verified=is_verified).user_id

    def update_profile(self, user_id, *, name, role, is_verified):
        current = self.items.get(int(user_id))
        if not current:
            return False
        self.items[current.user_id] = replace(current, name=name, role=role, is_verified=is_verified)
        return True

    def set_verification(self, user_id, *, token_hash, otp_hash, expires_at):
        current = self.items.get(int(user_id))
        if not current:
            return False
        self.items[current.user_id] = replace(
            current,
            verification_token=token_hash,
            verification_otp=otp_hash,
            verification_token_expire=expires_at,
        )
        return True

    def clear_verification(self, user_id):
        return self.set_verification(user_id, token_hash=None, otp_hash=None, expires_at=None)

    def mark_verified(self, user_id):
        self.clear_verification(user_id)
        current = self.items.get(int(user_id))
        if not current:
            return False
        self.items[current.user_id] = replace(current, is_verified=True)
        return True


class RecordingNotifier:
    def __init__(self):
        self.sent: list[dict] = []
        self.fail = False

    def send(self, *, to, subject, html):
        if self.fail:
            raise NotifierError("Error sending email")
        self.sent.append({"to": to, "subject": subject, "html": html})


@pytest.fixture
def admin() -> Caller:
    return Caller(user_id=1, email="admin@school.edu", role=Role.ADMIN)


@pytest.fixture
def other_admin() -> Caller:
    return Caller(user_id=9, email="coordinator@school.edu", role=Role.ADMIN)


@pytest.fixture
def student() -> Caller:
    return Caller(user_id=2, email="ana@school.edu", role=Role.STUDENT)


@pytest.fixture
def other_student() -> Caller:
    return Caller(user_id=3, email="bruno@school.edu", role=Role.STUDENT)


@pytest.fixture
def subjects_repo() -> FakeSubjectsRepo:
    return FakeSubjectsRepo()


@pytest.fixture
def attendance_repo() -> FakeAttendanceRepo:
    return FakeAttendanceRepo()


@pytest.fixture
def events_repo() -> FakeEventsRepo:
    return FakeEventsRepo()


@pytest.fixture
def suggestions_repo() -> FakeSuggestionsRepo:
    return FakeSuggestionsRepo()


@pytest.fixture
def users_repo() -> FakeUsersRepo:
    return FakeUsersRepo()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def subject_service(subjects_repo) -> SubjectService:
    return SubjectService(subjects_repo)


@pytest.fixture
def attendance_service(attendance_repo, subjects_repo) -> AttendanceService:
    return AttendanceService(attendance_repo, subjects_repo)


@pytest.fixture
def event_service(events_repo) -> EventService:
    return EventService(events_repo)


@pytest.fixture
def suggestion_service(suggestions_repo, events_repo) -> SuggestionService:
    return SuggestionService(suggestions_repo, events_repo, clock=lambda: FIXED_NOW)
