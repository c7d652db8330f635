from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for users and their pending verification secrets."""

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_verification_token(self, token_hash: str) -> Optional[User]:
        raise NotImplementedError

    def create(self, *, email: str, name: str, role: Role = Role.STUDENT, is_verified: bool = False) -> int:
        raise NotImplementedError

    def update_profile(self, user_id: int, *, name: str, role: Role, is_verified: bool) -> bool:
        raise NotImplementedError

    def set_verification(
        self,
        user_id: int,
        *,
        token_hash: Optional[str],
        otp_hash: Optional[str],
        expires_at: Optional[datetime],
    ) -> bool:
        raise NotImplementedError

    def clear_verification(self, user_id: int) -> bool:
        raise NotImplementedError

    def mark_verified(self, user_id: int) -> bool:
        """Set is_verified and clear every verification secret."""
        raise NotImplementedError
