from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = """
    user_id, email, name, role, is_verified, verification_token,
    verification_otp, verification_token_expire, created_at
"""


def _row_to_user(r: dict) -> User:
    return User(
        user_id=int(r["user_id"]),
        email=r["email"],
        name=r["name"],
        role=Role(r["role"]),
        is_verified=bool(r["is_verified"]),
        verification_token=r.get("verification_token"),
        verification_otp=r.get("verification_otp"),
        verification_token_expire=r.get("verification_token_expire"),
        created_at=r.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value: object) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {where}=%s", (value,))
            r = fetchone(cur)
            return _row_to_user(r) if r else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id", int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email", email)

    def get_by_verification_token(self, token_hash: str) -> Optional[User]:
        return self._get_one("verification_token", token_hash)

    def create(self, *, email: str, name: str, role: Role = Role.STUDENT, is_verified: bool = False) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO users(email, name, role, is_verified) VALUES(%s,%s,%s,%s)",
                (email, name, role.value, 1 if is_verified else 0),
            )
            return int(cur.lastrowid)

    def update_profile(self, user_id: int, *, name: str, role: Role, is_verified: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET name=%s, role=%s, is_verified=%s WHERE user_id=%s",
                (name, role.value, 1 if is_verified else 0, int(user_id)),
            )
            return cur.rowcount > 0

    def set_verification(
        self,
        user_id: int,
        *,
        token_hash: Optional[str],
        otp_hash: Optional[str],
        expires_at: Optional[datetime],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET verification_token=%s, verification_otp=%s, verification_token_expire=%s
                WHERE user_id=%s
                """,
                (token_hash, otp_hash, expires_at, int(user_id)),
            )
            return cur.rowcount > 0

    def clear_verification(self, user_id: int) -> bool:
        return self.set_verification(user_id, token_hash=None, otp_hash=None, expires_at=None)

    def mark_verified(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET is_verified=1, verification_token=NULL, verification_otp=NULL,
                    verification_token_expire=NULL
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            return cur.rowcount > 0
