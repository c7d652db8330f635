from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.access import Caller, require_caller
from ..core.constants import ACCESS_CODE_MINUTES, EMAIL_VERIFICATION_HOURS
from ..core.enums import Role
from ..core.exceptions import NotFoundError, NotifierError, StoreError, ValidationError
from ..core.security import SessionTokens, hash_token, new_otp, new_url_token
from ..notifications.notifier import Notifier
from ..notifications.rendering import render_email
from .model import AuthSession, User
from .repository import UserRepository

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Invalid email address")
    return email


class AuthService:
    """Use case: password-less identity (email link, OTP, magic link)."""

    def __init__(
        self,
        users: UserRepository,
        notifier: Notifier,
        tokens: SessionTokens,
        *,
        frontend_url: str,
        clock: Callable[[], datetime] = now_local,
    ):
        self._users = users
        self._notifier = notifier
        self._tokens = tokens
        self._frontend_url = frontend_url.rstrip("/")
        self._clock = clock

    def _session(self, user: User) -> AuthSession:
        token = self._tokens.issue(user_id=user.user_id, email=user.email, role=user.role)
        return AuthSession(token=token, user=user)

    def _reload(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise StoreError("User was not saved")
        return user

    def _is_expired(self, user: User) -> bool:
        return user.verification_token_expire is None or user.verification_token_expire <= self._clock()

    def _deliver(self, user: User, *, subject: str, html: str) -> None:
        try:
            self._notifier.send(to=user.email, subject=subject, html=html)
        except NotifierError:
            logger.error("email delivery to user %s failed, clearing verification secrets", user.user_id)
            self._users.clear_verification(user.user_id)
            raise

    def register(self, *, email: Optional[str], name: Optional[str]) -> User:
        email = normalize_email(email)
        name = require_non_empty(name, "Name")

        user = self._users.get_by_email(email)
        if user and user.is_verified:
            raise ValidationError("This email is already registered")
        if user is None:
            user = self._reload(self._users.create(email=email, name=name))
            logger.info("user %s registered", user.user_id)

        token = new_url_token()
        self._users.set_verification(
            user.user_id,
            token_hash=hash_token(token),
            otp_hash=None,
            expires_at=self._clock() + timedelta(hours=EMAIL_VERIFICATION_HOURS),
        )
        html = render_email(
            "verify_email.html",
            name=user.name,
            verification_url=f"{self._frontend_url}/verify-email/{token}",
            expires_hours=EMAIL_VERIFICATION_HOURS,
        )
        self._deliver(user, subject="Verify your email - Class Calendar", html=html)
        return user

    def verify_email(self, token: Optional[str]) -> AuthSession:
        token = require_non_empty(token, "Token")
        user = self._users.get_by_verification_token(hash_token(token))
        if not user or self._is_expired(user):
            raise ValidationError("Invalid or expired token")

        self._users.mark_verified(user.user_id)
        logger.info("user %s verified email", user.user_id)
        return self._session(self._reload(user.user_id))

    def request_access(self, *, email: Optional[str]) -> None:
        email = normalize_email(email)
        user = self._users.get_by_email(email)
        if not user or not user.is_verified:
            raise NotFoundError("User not found or email not verified")

        otp = new_otp()
        magic = new_url_token()
        self._users.set_verification(
            user.user_id,
            token_hash=hash_token(magic),
            otp_hash=generate_password_hash(otp),
            expires_at=self._clock() + timedelta(minutes=ACCESS_CODE_MINUTES),
        )
        html = render_email(
            "access_code.html",
            name=user.name,
            otp=otp,
            access_url=f"{self._frontend_url}/magic-login/{magic}",
            expires_minutes=ACCESS_CODE_MINUTES,
        )
        self._deliver(user, subject="Your access code - Class Calendar", html=html)

    def verify_otp(self, *, email: Optional[str], otp: Optional[str]) -> AuthSession:
        email = normalize_email(email)
        otp = require_non_empty(otp, "Code")

        user = self._users.get_by_email(email)
        if not user or not user.verification_otp or self._is_expired(user):
            raise ValidationError("Invalid or expired code")
        if not check_password_hash(user.verification_otp, otp):
            raise ValidationError("Invalid or expired code")

        self._users.clear_verification(user.user_id)
        return self._session(user)

    def magic_login(self, token: Optional[str]) -> AuthSession:
        token = require_non_empty(token, "Token")
        user = self._users.get_by_verification_token(hash_token(token))
        if not user or not user.is_verified or self._is_expired(user):
            raise ValidationError("Invalid or expired link")

        self._users.clear_verification(user.user_id)
        return self._session(user)

    def me(self, caller: Optional[Caller]) -> User:
        caller = require_caller(caller)
        user = self._users.get_by_id(caller.user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def ensure_admin(self, *, email: Optional[str], name: Optional[str]) -> User:
        """Create the administrator account, or promote and verify an existing one."""
        email = normalize_email(email)
        name = require_non_empty(name, "Name")

        user = self._users.get_by_email(email)
        if user is None:
            user_id = self._users.create(email=email, name=name, role=Role.ADMIN, is_verified=True)
            logger.info("admin %s created", user_id)
            return self._reload(user_id)

        self._users.update_profile(user.user_id, name=name, role=Role.ADMIN, is_verified=True)
        logger.info("user %s promoted to admin", user.user_id)
        return self._reload(user.user_id)
