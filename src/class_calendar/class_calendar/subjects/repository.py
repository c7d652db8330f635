from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Subject, SubjectDraft


class SubjectRepository(Protocol):
    """Repository interface for subjects.

    Note (DIP): services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        raise NotImplementedError

    def list_subjects(self, *, owner_id: Optional[int] = None, active: Optional[bool] = None) -> Sequence[Subject]:
        """Subjects sorted by name, optionally scoped to one owner."""

        raise NotImplementedError

    def create(self, *, owner_id: int, draft: SubjectDraft) -> int:
        raise NotImplementedError

    def replace(self, *, subject_id: int, draft: SubjectDraft) -> bool:
        raise NotImplementedError

    def set_active(self, *, subject_id: int, active: bool) -> bool:
        raise NotImplementedError

    def delete(self, *, subject_id: int) -> bool:
        raise NotImplementedError
