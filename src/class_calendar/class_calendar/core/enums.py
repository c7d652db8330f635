from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    STUDENT = "student"


class EventType(str, Enum):
    CLASS = "class"
    ASSIGNMENT = "assignment"
    EXAM = "exam"


class SuggestionKind(str, Enum):
    """What a suggestion proposes to do with an event."""

    NEW = "new"
    UPDATE = "update"
    DELETE = "delete"


class SuggestionStatus(str, Enum):
    """Approval workflow state. APPROVED and REJECTED are terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
