from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_str(value: Any, field_name: str) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    raise ValidationError(f"{field_name} must be a string")


def require_list(value: Any, field_name: str) -> list:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{field_name} must be a list")
    return list(value)


def require_non_empty(value: Any, field_name: str) -> str:
    text = require_str(value, field_name)
    if text is None or not text.strip():
        raise ValidationError(f"{field_name} is required")
    return text.strip()


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} cannot exceed {max_len} characters")
    return value


def require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def require_int_range(value: Any, field_name: str, low: int, high: int) -> int:
    number = require_int(value, field_name)
    if number < low or number > high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return number


def optional_text(value: Any, field_name: str = "Text") -> Optional[str]:
    text = (require_str(value, field_name) or "").strip()
    return text or None


def parse_bool(value: Any) -> Optional[bool]:
    """Query-string friendly bool: ``None`` when absent."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
