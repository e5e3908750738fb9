"""Business-day arithmetic over inclusive civil-date ranges."""

from __future__ import annotations

from datetime import date

from ..core.constants import WEEKEND_DAYS


def is_counted_day(day: date, exclude_weekends: bool) -> bool:
    return not (exclude_weekends and day.weekday() in WEEKEND_DAYS)


def business_days(start: date, end: date, exclude_weekends: bool) -> int:
    """Count days in ``[start, end]`` that draw on the balance.

    With ``exclude_weekends`` Saturdays and Sundays are skipped, otherwise every
    calendar day counts. An inverted range counts as zero.
    """
    total = (end - start).days + 1
    if total <= 0:
        return 0
    if not exclude_weekends:
        return total

    full_weeks, extra = divmod(total, 7)
    count = full_weeks * (7 - len(WEEKEND_DAYS))
    first = start.weekday()
    for offset in range(extra):
        if (first + offset) % 7 not in WEEKEND_DAYS:
            count += 1
    return count
