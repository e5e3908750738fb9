from __future__ import annotations

from datetime import date, datetime

from ..core.exceptions import ValidationError


def parse_iso_date(value: str, field_name: str = "date") -> date:
    """Parse YYYY-MM-DD string into date."""
    v = (value or "").strip() if isinstance(value, str) else value
    if isinstance(v, date):
        return v
    try:
        return datetime.strptime(v, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name} (expected YYYY-MM-DD)")


def today_local() -> date:
    """Current civil date.

    Note: Wrapped so services can take it as an injectable clock in tests.
    """
    return date.today()
