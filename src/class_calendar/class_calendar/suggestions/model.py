from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import SuggestionKind, SuggestionStatus
from ..events.model import Event


@dataclass(frozen=True)
class AdminResponse:
    message: str
    responded_at: datetime
    responded_by: int

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "responded_at": self.responded_at.isoformat(),
            "responded_by": self.responded_by,
        }


@dataclass(frozen=True)
class EventSuggestion:
    """A student's proposal to create, change or remove an event.

    ``original_data`` is the event as it was at submission time, kept for audit
    only. Approval applies ``payload`` to the event as it is at approval time.
    """

    suggestion_id: int
    user_id: int
    kind: SuggestionKind
    reason: str
    status: SuggestionStatus
    created_at: datetime
    event_id: Optional[int] = None
    payload: Optional[dict] = None
    original_data: Optional[dict] = None
    admin_response: Optional[AdminResponse] = None
    updated_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == SuggestionStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "suggestion_id": self.suggestion_id,
            "user_id": self.user_id,
            "event_id": self.event_id,
            "kind": self.kind.value,
            "payload": self.payload,
            "original_data": self.original_data,
            "reason": self.reason,
            "status": self.status.value,
            "admin_response": self.admin_response.to_dict() if self.admin_response else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class ApprovalOutcome:
    """Approved suggestion plus what happened to the event."""

    suggestion: EventSuggestion
    event: Optional[Event]
    event_deleted: bool = False

    def to_dict(self) -> dict:
        event = self.event.to_dict() if self.event else None
        if event is not None and self.event_deleted:
            event["deleted"] = True
        return {"suggestion": self.suggestion.to_dict(), "event": event}


@dataclass(frozen=True)
class SuggestionListing:
    items: list[EventSuggestion]
    counts: dict[str, int]

    def to_dict(self) -> dict:
        return {
            "count": len(self.items),
            "stats": dict(self.counts),
            "data": [s.to_dict() for s in self.items],
        }
