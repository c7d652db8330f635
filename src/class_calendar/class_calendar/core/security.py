"""Session tokens and one-time secrets."""
from __future__ import annotations

import hashlib
import secrets
from datetime import timedelta
from typing import Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from .access import Caller
from .constants import DEFAULT_SESSION_DAYS, OTP_DIGITS
from .enums import Role
from .exceptions import AuthenticationError


def hash_token(token: str) -> str:
    """Deterministic hash used to look a magic-link/verification token up."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def new_url_token() -> str:
    return secrets.token_hex(32)


def new_otp() -> str:
    low = 10 ** (OTP_DIGITS - 1)
    return str(low + secrets.randbelow(9 * low))


class SessionTokens:
    """Signed, time-bounded session tokens carrying {id, email, role}."""

    SALT = "class-calendar-session"

    def __init__(self, secret_key: str, *, max_age: timedelta = timedelta(days=DEFAULT_SESSION_DAYS)):
        if not secret_key:
            raise ValueError("secret_key is required for session tokens")
        self._serializer = URLSafeTimedSerializer(secret_key, salt=self.SALT)
        self._max_age = max_age

    def issue(self, *, user_id: int, email: str, role: Role) -> str:
        return self._serializer.dumps({"id": int(user_id), "email": email, "role": role.value})

    def resolve(self, token: str) -> Caller:
        try:
            data = self._serializer.loads(token, max_age=int(self._max_age.total_seconds()))
        except SignatureExpired:
            raise AuthenticationError("Not authorized: token expired")
        except BadSignature:
            raise AuthenticationError("Not authorized: invalid token")
        try:
            return Caller(user_id=int(data["id"]), email=str(data["email"]), role=Role(data["role"]))
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Not authorized: invalid token")

    def resolve_optional(self, token: Optional[str]) -> Optional[Caller]:
        """Optional mode: a missing or bad credential means an anonymous caller."""
        if not token:
            return None
        try:
            return self.resolve(token)
        except AuthenticationError:
            return None
