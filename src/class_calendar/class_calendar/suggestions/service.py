from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Mapping, Optional, TypeVar

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_int, require_max_length, require_non_empty, require_str
from ..core.access import Caller, require_admin, require_caller, require_role
from ..core.constants import DEFAULT_APPROVAL_MESSAGE, SUGGESTION_REASON_MAX_LENGTH
from ..core.enums import Role, SuggestionKind, SuggestionStatus
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from ..events.model import Event
from ..events.repository import EventRepository
from ..events.validation import merge_event, validate_event
from .model import ApprovalOutcome, EventSuggestion, SuggestionListing
from .repository import SuggestionRepository

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def _parse_enum(enum_cls: type[E], value: Any, label: str) -> Optional[E]:
    if value in (None, ""):
        return None
    try:
        return enum_cls(str(value))
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {label}. Use: {allowed}")


class SuggestionService:
    """Use cases: student suggestions against the event calendar and their review.

    A suggestion is created PENDING and moves exactly once to APPROVED or
    REJECTED. Approval first applies the change to the event store, then marks
    the suggestion; the two writes are not one transaction.
    """

    def __init__(
        self,
        suggestions: SuggestionRepository,
        events: EventRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._suggestions = suggestions
        self._events = events
        self._clock = clock

    def _get(self, suggestion_id: Any) -> EventSuggestion:
        suggestion = self._suggestions.get_by_id(require_int(suggestion_id, "Suggestion id"))
        if not suggestion:
            raise NotFoundError("Suggestion not found")
        return suggestion

    @staticmethod
    def _require_pending(suggestion: EventSuggestion) -> None:
        if not suggestion.is_pending:
            raise ConflictError("This suggestion has already been processed")

    def submit(
        self,
        caller: Optional[Caller],
        *,
        kind: Any,
        reason: Optional[str],
        event_id: Any = None,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> EventSuggestion:
        caller = require_role(caller, [Role.STUDENT])
        reason = require_str(reason, "Reason")
        if not kind or not (reason or "").strip():
            raise ValidationError("Suggestion kind and reason are required")
        kind = _parse_enum(SuggestionKind, kind, "suggestion kind")
        reason = require_max_length(require_non_empty(reason, "Reason"), "Reason", SUGGESTION_REASON_MAX_LENGTH)

        original_data = None
        target_id = None
        if kind in (SuggestionKind.UPDATE, SuggestionKind.DELETE):
            if event_id in (None, ""):
                raise ValidationError("Event id is required for updates and deletions")
            event = self._events.get_by_id(require_int(event_id, "Event id"))
            if not event:
                raise NotFoundError("Event not found")
            target_id = event.event_id
            original_data = event.to_dict()

        if kind in (SuggestionKind.NEW, SuggestionKind.UPDATE):
            if not payload or not isinstance(payload, Mapping):
                raise ValidationError("Suggested event data is required for new events and updates")
            payload = dict(payload)
        else:
            payload = None

        suggestion_id = self._suggestions.create(
            user_id=caller.user_id,
            kind=kind,
            event_id=target_id,
            payload=payload,
            original_data=original_data,
            reason=reason,
        )
        suggestion = self._suggestions.get_by_id(suggestion_id)
        if not suggestion:
            raise StoreError("Suggestion was not saved")
        logger.info("suggestion %s (%s) submitted by user %s", suggestion_id, kind.value, caller.user_id)
        return suggestion

    def _apply(self, admin: Caller, suggestion: EventSuggestion) -> tuple[Optional[Event], bool]:
        """Run the suggested change against the event store. Returns (event, deleted)."""
        if suggestion.kind == SuggestionKind.NEW:
            event_id = self._events.create(owner_id=admin.user_id, draft=validate_event(suggestion.payload or {}))
            event = self._events.get_by_id(event_id)
            if not event:
                raise StoreError("Event was not saved")
            return event, False

        if suggestion.event_id is None:
            raise NotFoundError("Event id not found on suggestion")
        current = self._events.get_by_id(suggestion.event_id)

        if suggestion.kind == SuggestionKind.UPDATE:
            if not current:
                raise NotFoundError("Event not found for update")
            draft = merge_event(current, suggestion.payload or {})
            if not self._events.replace(event_id=current.event_id, draft=draft):
                raise NotFoundError("Event not found for update")
            return self._events.get_by_id(current.event_id), False

        if not current or not self._events.delete(event_id=current.event_id):
            raise NotFoundError("Event not found for deletion")
        return current, True

    def approve(self, caller: Optional[Caller], suggestion_id: Any, *, message: Optional[str] = None) -> ApprovalOutcome:
        admin = require_admin(caller)
        suggestion = self._get(suggestion_id)
        self._require_pending(suggestion)

        # A failing event change leaves the suggestion pending.
        event, deleted = self._apply(admin, suggestion)

        try:
            decided = self._suggestions.decide(
                suggestion_id=suggestion.suggestion_id,
                status=SuggestionStatus.APPROVED,
                message=optional_text(message, "Message") or DEFAULT_APPROVAL_MESSAGE,
                responded_by=admin.user_id,
                responded_at=self._clock(),
            )
        except DomainError:
            logger.error(
                "suggestion %s: event change applied but marking it approved failed; event and suggestion now disagree",
                suggestion.suggestion_id,
            )
            raise
        if not decided:
            logger.error(
                "suggestion %s was processed concurrently after its event change was applied",
                suggestion.suggestion_id,
            )
            raise ConflictError("This suggestion has already been processed")

        logger.info("suggestion %s approved by admin %s", suggestion.suggestion_id, admin.user_id)
        return ApprovalOutcome(suggestion=self._get(suggestion.suggestion_id), event=event, event_deleted=deleted)

    def reject(self, caller: Optional[Caller], suggestion_id: Any, *, message: Optional[str]) -> EventSuggestion:
        admin = require_admin(caller)
        message = optional_text(message, "Message")
        if not message:
            raise ValidationError("A rejection message is required")

        suggestion = self._get(suggestion_id)
        self._require_pending(suggestion)

        decided = self._suggestions.decide(
            suggestion_id=suggestion.suggestion_id,
            status=SuggestionStatus.REJECTED,
            message=message,
            responded_by=admin.user_id,
            responded_at=self._clock(),
        )
        if not decided:
            raise ConflictError("This suggestion has already been processed")

        logger.info("suggestion %s rejected by admin %s", suggestion.suggestion_id, admin.user_id)
        return self._get(suggestion.suggestion_id)

    def get(self, caller: Optional[Caller], suggestion_id: Any) -> EventSuggestion:
        caller = require_caller(caller)
        suggestion = self._get(suggestion_id)
        if not caller.is_admin and suggestion.user_id != caller.user_id:
            raise AuthorizationError("Access denied")
        return suggestion

    def delete(self, caller: Optional[Caller], suggestion_id: Any) -> None:
        caller = require_caller(caller)
        suggestion = self._get(suggestion_id)
        if not caller.is_admin and suggestion.user_id != caller.user_id:
            raise AuthorizationError("Access denied")
        if not suggestion.is_pending:
            raise ConflictError("A processed suggestion cannot be deleted")
        if not self._suggestions.delete_pending(suggestion_id=suggestion.suggestion_id):
            raise ConflictError("A processed suggestion cannot be deleted")

    def list_mine(self, caller: Optional[Caller], *, status: Any = None, kind: Any = None) -> list[EventSuggestion]:
        caller = require_caller(caller)
        return list(
            self._suggestions.list_suggestions(
                status=_parse_enum(SuggestionStatus, status, "status"),
                kind=_parse_enum(SuggestionKind, kind, "suggestion kind"),
                user_id=caller.user_id,
            )
        )

    def list_pending(self, caller: Optional[Caller]) -> list[EventSuggestion]:
        """Pending suggestions, oldest first."""
        require_admin(caller)
        return list(self._suggestions.list_suggestions(status=SuggestionStatus.PENDING, oldest_first=True))

    def list_all(
        self,
        caller: Optional[Caller],
        *,
        status: Any = None,
        kind: Any = None,
        user_id: Any = None,
    ) -> SuggestionListing:
        require_admin(caller)
        items = list(
            self._suggestions.list_suggestions(
                status=_parse_enum(SuggestionStatus, status, "status"),
                kind=_parse_enum(SuggestionKind, kind, "suggestion kind"),
                user_id=require_int(user_id, "User id") if user_id not in (None, "") else None,
            )
        )
        counts = {"total": len(items)}
        for state in SuggestionStatus:
            counts[state.value] = sum(1 for s in items if s.status == state)
        return SuggestionListing(items=items, counts=counts)
