from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from types import ModuleType
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_SESSION_DAYS
from .core.security import SessionTokens
from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLEventRepository
from .events.repository import EventRepository
from .events.service import EventService
from .notifications.notifier import ConsoleNotifier, HttpEmailNotifier, Notifier
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.repository import SubjectRepository
from .subjects.service import SubjectService
from .suggestions.mysql_suggestion_repository import MySQLSuggestionRepository
from .suggestions.repository import SuggestionRepository
from .suggestions.service import SuggestionService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    subjects_repo: SubjectRepository
    attendance_repo: AttendanceRepository
    events_repo: EventRepository
    suggestions_repo: SuggestionRepository

    tokens: SessionTokens
    notifier: Notifier

    auth_service: AuthService
    subject_service: SubjectService
    attendance_service: AttendanceService
    event_service: EventService
    suggestion_service: SuggestionService

    conn: Optional[DatabaseConnection] = None


def build_notifier(settings: ModuleType) -> Notifier:
    api_url = getattr(settings, "EMAIL_API_URL", "")
    if not api_url and getattr(settings, "DEBUG", False):
        logger.warning("EMAIL_API_URL not set; emails will be logged instead of sent")
        return ConsoleNotifier()
    return HttpEmailNotifier(
        api_url=api_url,
        api_key=getattr(settings, "EMAIL_API_KEY", ""),
        sender=getattr(settings, "EMAIL_FROM", ""),
    )


def wire_services(
    *,
    users_repo: UserRepository,
    subjects_repo: SubjectRepository,
    attendance_repo: AttendanceRepository,
    events_repo: EventRepository,
    suggestions_repo: SuggestionRepository,
    tokens: SessionTokens,
    notifier: Notifier,
    frontend_url: str,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build the services over any set of repositories (MySQL or in-memory)."""
    return Container(
        users_repo=users_repo,
        subjects_repo=subjects_repo,
        attendance_repo=attendance_repo,
        events_repo=events_repo,
        suggestions_repo=suggestions_repo,
        tokens=tokens,
        notifier=notifier,
        auth_service=AuthService(users_repo, notifier, tokens, frontend_url=frontend_url),
        subject_service=SubjectService(subjects_repo),
        attendance_service=AttendanceService(attendance_repo, subjects_repo),
        event_service=EventService(events_repo),
        suggestion_service=SuggestionService(suggestions_repo, events_repo),
        conn=conn,
    )


def build_container(*, db_config: dict, settings: ModuleType) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    tokens = SessionTokens(
        getattr(settings, "SECRET_KEY"),
        max_age=timedelta(days=int(getattr(settings, "SESSION_TOKEN_DAYS", DEFAULT_SESSION_DAYS))),
    )

    return wire_services(
        users_repo=MySQLUserRepository(conn),
        subjects_repo=MySQLSubjectRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        events_repo=MySQLEventRepository(conn),
        suggestions_repo=MySQLSuggestionRepository(conn),
        tokens=tokens,
        notifier=build_notifier(settings),
        frontend_url=getattr(settings, "FRONTEND_URL", "http://localhost:5173"),
        conn=conn,
    )
