from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.access import Caller
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Verification fields hold hashes only; the plain token/code is only ever
    sent by email. One expiry is shared by the OTP and the magic link.
    """

    user_id: int
    email: str
    name: str
    role: Role = Role.STUDENT
    is_verified: bool = False
    verification_token: Optional[str] = None
    verification_otp: Optional[str] = None
    verification_token_expire: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def as_caller(self) -> Caller:
        return Caller(user_id=self.user_id, email=self.email, role=self.role)

    def to_public_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "is_verified": self.is_verified,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class AuthSession:
    token: str
    user: User

    def to_dict(self) -> dict:
        return {"token": self.token, "user": self.user.to_public_dict()}
