from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_non_negative(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")
    if number < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return number


def optional_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


def normalize_email(value: str) -> str:
    email = require_non_empty(value, "Email").lower()
    if "@" not in email:
        raise ValidationError("Email is not valid")
    return email


def require_bool(value, field_name: str) -> bool:
    # JSON strings such as "false" must not be read as truthy.
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be true or false")
    return value
