from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def optional_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    """Strip and bound an optional text field; blank becomes None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    v = value.strip()
    if not v:
        return None
    if len(v) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return v


def require_non_negative_int(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, bool) or number < 0:
        raise ValidationError(f"{field_name} must be a non-negative integer")
    return number
