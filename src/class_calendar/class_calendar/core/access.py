"""Access control shared by every service.

A ``Caller`` is the identity resolved from a session token. ``None`` stands
for an anonymous caller, which read filters treat like a student.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .enums import Role
from .exceptions import AuthenticationError, AuthorizationError


@dataclass(frozen=True)
class Caller:
    user_id: int
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def require_caller(caller: Optional[Caller]) -> Caller:
    if caller is None:
        raise AuthenticationError("Not authorized: token not provided")
    return caller


def require_role(caller: Optional[Caller], allowed: Iterable[Role]) -> Caller:
    """Return the caller when its role is allowed, else raise."""
    caller = require_caller(caller)
    allowed = set(allowed)
    if caller.role not in allowed:
        names = ", ".join(sorted(r.value for r in allowed))
        raise AuthorizationError(f"Role '{caller.role.value}' not authorized. Required: {names}")
    return caller


def require_admin(caller: Optional[Caller]) -> Caller:
    return require_role(caller, [Role.ADMIN])


def admin_scope(caller: Optional[Caller]) -> Optional[int]:
    """Owner id to filter admin-owned resources by.

    Admins see what they own; students and anonymous callers see everything.
    """
    if caller is not None and caller.is_admin:
        return caller.user_id
    return None
