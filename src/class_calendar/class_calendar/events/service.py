from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import month_bounds, parse_iso_date
from ..common.validators import require_int
from ..core.access import Caller, admin_scope, require_admin
from ..core.enums import EventType
from ..core.exceptions import AuthorizationError, NotFoundError, StoreError, ValidationError
from .model import Event
from .repository import EventRepository
from .validation import merge_event, validate_event

logger = logging.getLogger(__name__)


class EventService:
    """Use cases: calendar events. Admins write, everyone reads.

    Students propose changes through the suggestion workflow instead.
    """

    def __init__(self, events: EventRepository):
        self._events = events

    def _get_owned(self, caller: Caller, event_id: Any) -> Event:
        event = self._events.get_by_id(require_int(event_id, "Event id"))
        if not event or event.user_id != caller.user_id:
            raise NotFoundError("Event not found")
        return event

    def list_events(
        self,
        caller: Optional[Caller],
        *,
        start: Any = None,
        end: Any = None,
        event_type: Any = None,
    ) -> Sequence[Event]:
        kind = None
        if event_type:
            try:
                kind = EventType(str(event_type))
            except ValueError:
                raise ValidationError("Invalid event type")
        return self._events.list_events(
            owner_id=admin_scope(caller),
            start=parse_iso_date(start) if start else None,
            end=parse_iso_date(end) if end else None,
            event_type=kind,
        )

    def events_by_month(self, caller: Optional[Caller], year: Any, month: Any) -> Sequence[Event]:
        start, end = month_bounds(require_int(year, "Year"), require_int(month, "Month"))
        return self._events.list_events(owner_id=admin_scope(caller), start=start, end=end)

    def get(self, caller: Optional[Caller], event_id: Any) -> Event:
        event = self._events.get_by_id(require_int(event_id, "Event id"))
        if not event:
            raise NotFoundError("Event not found")
        if caller is not None and caller.is_admin and event.user_id != caller.user_id:
            raise AuthorizationError("Access denied")
        return event

    def create(self, caller: Optional[Caller], data: Mapping[str, Any]) -> Event:
        caller = require_admin(caller)
        event_id = self._events.create(owner_id=caller.user_id, draft=validate_event(data))
        event = self._events.get_by_id(event_id)
        if not event:
            raise StoreError("Event was not saved")
        return event

    def update(self, caller: Optional[Caller], event_id: Any, data: Mapping[str, Any]) -> Event:
        caller = require_admin(caller)
        current = self._get_owned(caller, event_id)
        if not self._events.replace(event_id=current.event_id, draft=merge_event(current, data)):
            raise NotFoundError("Event not found")
        return self._get_owned(caller, current.event_id)

    def delete(self, caller: Optional[Caller], event_id: Any) -> None:
        caller = require_admin(caller)
        event = self._get_owned(caller, event_id)
        if not self._events.delete(event_id=event.event_id):
            raise NotFoundError("Event not found")
        logger.info("event %s deleted by admin %s", event.event_id, caller.user_id)

    def toggle_complete(self, caller: Optional[Caller], event_id: Any) -> Event:
        caller = require_admin(caller)
        event = self._get_owned(caller, event_id)
        self._events.set_completed(event_id=event.event_id, completed=not event.completed)
        return self._get_owned(caller, event.event_id)
