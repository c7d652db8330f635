"""Subject validation, run before anything reaches a repository."""
from __future__ import annotations

from typing import Any, Mapping

from ..common.datetime_utils import parse_iso_date
from ..common.validators import (
    optional_text,
    parse_bool,
    require_int,
    require_int_range,
    require_list,
    require_non_empty,
)
from ..core.constants import (
    DEFAULT_SUBJECT_COLOR,
    MAX_DAY_OF_WEEK,
    MAX_PERIOD,
    MIN_DAY_OF_WEEK,
    MIN_PERIOD,
)
from ..core.exceptions import ValidationError
from .model import ScheduleEntry, SubjectDraft


def validate_schedule(raw: Any) -> tuple[ScheduleEntry, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)):
        raise ValidationError("Schedule must be a list of {day_of_week, periods}")

    entries: list[ScheduleEntry] = []
    seen_days: set[int] = set()
    for item in raw:
        if isinstance(item, ScheduleEntry):
            day, periods = item.day_of_week, item.periods
        elif isinstance(item, Mapping):
            day, periods = item.get("day_of_week"), item.get("periods")
        else:
            raise ValidationError("Schedule entries must have day_of_week and periods")

        day = require_int_range(day, "Day of week", MIN_DAY_OF_WEEK, MAX_DAY_OF_WEEK)
        if day in seen_days:
            raise ValidationError("The same day of the week cannot appear twice in a schedule")
        seen_days.add(day)

        periods = require_list(periods, "Periods")
        if not periods:
            raise ValidationError("Each schedule day needs at least one period between 1 and 5")
        checked = tuple(require_int_range(p, "Period", MIN_PERIOD, MAX_PERIOD) for p in periods)
        entries.append(ScheduleEntry(day_of_week=day, periods=checked))
    return tuple(entries)


def validate_subject(data: Mapping[str, Any]) -> SubjectDraft:
    name = require_non_empty(data.get("name"), "Subject name")
    teacher = require_non_empty(data.get("teacher"), "Teacher name")

    if not data.get("semester_start_date"):
        raise ValidationError("Semester start date is required")
    if not data.get("semester_end_date"):
        raise ValidationError("Semester end date is required")
    start = parse_iso_date(data["semester_start_date"])
    end = parse_iso_date(data["semester_end_date"])
    if end <= start:
        raise ValidationError("Semester end date must be after the start date")

    if data.get("total_classes") is None:
        raise ValidationError("Total classes in the semester is required")
    total_classes = require_int(data["total_classes"], "Total classes")
    if total_classes < 1:
        raise ValidationError("There must be at least 1 class")

    color = optional_text(data.get("color"), "Color") or DEFAULT_SUBJECT_COLOR
    active = parse_bool(data.get("active"))

    return SubjectDraft(
        name=name,
        teacher=teacher,
        schedule=validate_schedule(data.get("schedule") or []),
        semester_start_date=start,
        semester_end_date=end,
        total_classes=total_classes,
        color=color,
        active=True if active is None else active,
    )
