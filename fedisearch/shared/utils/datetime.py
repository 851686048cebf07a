"""
UTC datetime utilities for date-based search operators.

Search operators name calendar days (before:2024-01-31); both backends turn
them into timezone-aware UTC bounds with these helpers.
"""

from datetime import UTC, date, datetime, time, timedelta


def start_of_day_utc(day: date) -> datetime:
    """
    Return midnight UTC at the start of day.

    Args:
        day: Calendar date

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.combine(day, time.min, tzinfo=UTC)


def day_bounds_utc(day: date) -> tuple[datetime, datetime]:
    """
    Return the half-open UTC interval [start, end) covering day.

    Args:
        day: Calendar date

    Returns:
        (start of day, start of the following day), both UTC-aware
    """
    start = start_of_day_utc(day)
    return start, start + timedelta(days=1)
