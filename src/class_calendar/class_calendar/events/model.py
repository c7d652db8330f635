from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import EventType


@dataclass(frozen=True)
class Event:
    """Domain entity: a calendar event owned by an admin."""

    event_id: int
    title: str
    event_type: EventType
    event_date: date
    user_id: int
    event_time: Optional[str] = None
    subject: Optional[str] = None
    description: Optional[str] = None
    recurring: bool = False
    days_of_week: tuple[int, ...] = ()
    completed: bool = False

    def to_dict(self) -> dict:
        return {
            "event_id": self.event_id,
            "title": self.title,
            "type": self.event_type.value,
            "date": self.event_date.isoformat(),
            "time": self.event_time,
            "subject": self.subject,
            "description": self.description,
            "recurring": self.recurring,
            "days_of_week": list(self.days_of_week),
            "user_id": self.user_id,
            "completed": self.completed,
        }


@dataclass(frozen=True)
class EventDraft:
    title: str
    event_type: EventType
    event_date: date
    event_time: Optional[str] = None
    subject: Optional[str] = None
    description: Optional[str] = None
    recurring: bool = False
    days_of_week: tuple[int, ...] = ()
    completed: bool = False
