from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import SuggestionKind, SuggestionStatus
from .model import EventSuggestion


class SuggestionRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        kind: SuggestionKind,
        event_id: Optional[int],
        payload: Optional[dict],
        original_data: Optional[dict],
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, suggestion_id: int) -> Optional[EventSuggestion]:
        raise NotImplementedError

    def list_suggestions(
        self,
        *,
        status: Optional[SuggestionStatus] = None,
        kind: Optional[SuggestionKind] = None,
        user_id: Optional[int] = None,
        oldest_first: bool = False,
    ) -> Sequence[EventSuggestion]:
        raise NotImplementedError

    def decide(
        self,
        *,
        suggestion_id: int,
        status: SuggestionStatus,
        message: str,
        responded_by: int,
        responded_at: datetime,
    ) -> bool:
        """Move a pending suggestion to a terminal status. False if it was not pending."""

        raise NotImplementedError

    def delete_pending(self, *, suggestion_id: int) -> bool:
        raise NotImplementedError
