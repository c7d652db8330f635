"""Event validation, run before anything reaches a repository."""
from __future__ import annotations

from typing import Any, Mapping

from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_text, parse_bool, require_int_range, require_list, require_non_empty
from ..core.constants import MAX_DAY_OF_WEEK, MIN_DAY_OF_WEEK
from ..core.enums import EventType
from ..core.exceptions import ValidationError
from .model import Event, EventDraft

EDITABLE_FIELDS = ("title", "type", "date", "time", "subject", "description", "recurring", "days_of_week", "completed")


def validate_event(data: Mapping[str, Any]) -> EventDraft:
    title = require_non_empty(data.get("title"), "Title")

    raw_type = data.get("type")
    if not raw_type:
        raise ValidationError("Event type is required")
    try:
        event_type = EventType(str(raw_type))
    except ValueError:
        allowed = ", ".join(t.value for t in EventType)
        raise ValidationError(f"Invalid event type. Use: {allowed}")

    if not data.get("date"):
        raise ValidationError("Date is required")
    event_date = parse_iso_date(data["date"])

    days = require_list(data.get("days_of_week"), "days_of_week")
    days_of_week = tuple(
        require_int_range(d, "Day of week", MIN_DAY_OF_WEEK, MAX_DAY_OF_WEEK) for d in days
    )
    recurring = bool(parse_bool(data.get("recurring")))
    if recurring and not days_of_week:
        raise ValidationError("Recurring events need at least one day of the week")

    return EventDraft(
        title=title,
        event_type=event_type,
        event_date=event_date,
        event_time=optional_text(data.get("time"), "Time"),
        subject=optional_text(data.get("subject"), "Subject"),
        description=optional_text(data.get("description"), "Description"),
        recurring=recurring,
        days_of_week=days_of_week,
        completed=bool(parse_bool(data.get("completed"))),
    )


def merge_event(current: Event, changes: Mapping[str, Any]) -> EventDraft:
    """Apply a partial change set on top of an existing event and validate the result."""
    merged = current.to_dict()
    merged.update({k: changes[k] for k in EDITABLE_FIELDS if k in changes})
    return validate_event(merged)
