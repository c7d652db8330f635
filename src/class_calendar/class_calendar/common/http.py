"""JSON response helpers and bearer-token decorators shared by the controllers."""
from __future__ import annotations

from functools import wraps
from typing import Any, Optional

from flask import g, jsonify, request

from ..core.exceptions import AuthenticationError, ValidationError
from ..core.security import SessionTokens


def ok(data: Any = None, *, status: int = 200, **extra: Any):
    body = {"success": True, "data": data}
    body.update(extra)
    return jsonify(body), status


def error_body(kind: str, message: str) -> dict:
    return {"success": False, "error": kind, "message": message}


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    return header[len("Bearer "):].strip() or None


def auth_decorators(tokens: SessionTokens):
    """Return (auth_required, auth_optional) view decorators.

    Both set ``g.caller``; the optional one leaves it ``None`` for anonymous
    or badly-authenticated requests.
    """

    def auth_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            token = bearer_token()
            if not token:
                raise AuthenticationError("Not authorized: token not provided")
            g.caller = tokens.resolve(token)
            return view(*args, **kwargs)

        return wrapper

    def auth_optional(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.caller = tokens.resolve_optional(bearer_token())
            return view(*args, **kwargs)

        return wrapper

    return auth_required, auth_optional
