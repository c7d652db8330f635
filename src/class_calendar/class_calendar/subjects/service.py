from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import require_int_range
from ..core.access import Caller, admin_scope, require_admin
from ..core.constants import MAX_DAY_OF_WEEK, MIN_DAY_OF_WEEK
from ..core.exceptions import AuthorizationError, NotFoundError, StoreError
from .model import Subject
from .repository import SubjectRepository
from .validation import validate_subject

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = (
    "name",
    "teacher",
    "color",
    "schedule",
    "semester_start_date",
    "semester_end_date",
    "total_classes",
    "active",
)


class SubjectService:
    """Use cases: subject registry (admin writes, open reads) and timetable views."""

    def __init__(self, subjects: SubjectRepository):
        self._subjects = subjects

    def _get_owned(self, caller: Caller, subject_id: int) -> Subject:
        subject = self._subjects.get_by_id(int(subject_id))
        if not subject or subject.user_id != caller.user_id:
            raise NotFoundError("Subject not found")
        return subject

    def list_subjects(self, caller: Optional[Caller], *, active: Optional[bool] = None) -> Sequence[Subject]:
        return self._subjects.list_subjects(owner_id=admin_scope(caller), active=active)

    def get(self, caller: Optional[Caller], subject_id: int) -> Subject:
        subject = self._subjects.get_by_id(int(subject_id))
        if not subject:
            raise NotFoundError("Subject not found")
        if caller is not None and caller.is_admin and subject.user_id != caller.user_id:
            raise AuthorizationError("Access denied")
        return subject

    def create(self, caller: Optional[Caller], data: Mapping[str, Any]) -> Subject:
        caller = require_admin(caller)
        draft = validate_subject(data)
        subject_id = self._subjects.create(owner_id=caller.user_id, draft=draft)
        subject = self._subjects.get_by_id(subject_id)
        if not subject:
            raise StoreError("Subject was not saved")
        logger.info("subject %s created by admin %s", subject_id, caller.user_id)
        return subject

    def update(self, caller: Optional[Caller], subject_id: int, data: Mapping[str, Any]) -> Subject:
        caller = require_admin(caller)
        current = self._get_owned(caller, subject_id)

        merged = current.to_dict()
        merged.update({k: data[k] for k in _EDITABLE_FIELDS if k in data})
        draft = validate_subject(merged)

        self._subjects.replace(subject_id=current.subject_id, draft=draft)
        return self._get_owned(caller, current.subject_id)

    def delete(self, caller: Optional[Caller], subject_id: int) -> None:
        caller = require_admin(caller)
        subject = self._get_owned(caller, subject_id)
        if not self._subjects.delete(subject_id=subject.subject_id):
            raise NotFoundError("Subject not found")
        logger.info("subject %s deleted by admin %s", subject.subject_id, caller.user_id)

    def toggle_active(self, caller: Optional[Caller], subject_id: int) -> Subject:
        caller = require_admin(caller)
        subject = self._get_owned(caller, subject_id)
        self._subjects.set_active(subject_id=subject.subject_id, active=not subject.active)
        logger.info("subject %s active=%s", subject.subject_id, not subject.active)
        return self._get_owned(caller, subject.subject_id)

    def week_schedule(self, caller: Optional[Caller]) -> dict[int, dict[int, list[dict]]]:
        """Day (0..6) -> period -> subjects taught in that slot, over active subjects."""
        week: dict[int, dict[int, list[dict]]] = {d: {} for d in range(MIN_DAY_OF_WEEK, MAX_DAY_OF_WEEK + 1)}
        for subject in self._subjects.list_subjects(owner_id=admin_scope(caller), active=True):
            for entry in subject.schedule:
                for period in entry.periods:
                    week[entry.day_of_week].setdefault(period, []).append(subject.slot_info())
        return week

    def day_schedule(self, caller: Optional[Caller], day_of_week: Any) -> dict[int, list[dict]]:
        day = require_int_range(day_of_week, "Day of week", MIN_DAY_OF_WEEK, MAX_DAY_OF_WEEK)
        return self.week_schedule(caller)[day]
