from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import EventType
from .model import Event, EventDraft


class EventRepository(Protocol):
    def get_by_id(self, event_id: int) -> Optional[Event]:
        raise NotImplementedError

    def list_events(
        self,
        *,
        owner_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        event_type: Optional[EventType] = None,
    ) -> Sequence[Event]:
        """Events sorted by date, then time."""

        raise NotImplementedError

    def create(self, *, owner_id: int, draft: EventDraft) -> int:
        raise NotImplementedError

    def replace(self, *, event_id: int, draft: EventDraft) -> bool:
        """Overwrite an event. False when it no longer exists."""

        raise NotImplementedError

    def set_completed(self, *, event_id: int, completed: bool) -> bool:
        raise NotImplementedError

    def delete(self, *, event_id: int) -> bool:
        raise NotImplementedError
