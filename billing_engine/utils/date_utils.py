"""Date manipulation utilities"""

import calendar
from datetime import datetime, timedelta, timezone
from typing import Optional

from billing_engine.domain.exceptions import InvalidIntervalError

MONTHS_PER_INTERVAL = {
    "monthly": 1,
    "quarterly": 3,
    "semiannual": 6,
    "annual": 12,
}


def to_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC, convert aware ones to UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def add_months(start: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the end of the target month"""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def validate_interval(interval: str, interval_days: Optional[int] = None) -> None:
    """Raise InvalidIntervalError unless `interval` can be stepped"""
    if interval == "custom_days":
        if isinstance(interval_days, bool) or not isinstance(interval_days, int) or interval_days <= 0:
            raise InvalidIntervalError(interval, interval_days)
    elif interval != "weekly" and interval not in MONTHS_PER_INTERVAL:
        raise InvalidIntervalError(interval, interval_days)


def advance_by_interval(
    start: datetime,
    n: int,
    interval: str,
    interval_days: Optional[int] = None,
) -> datetime:
    """
    Advance `start` by `n` intervals, computed in UTC.

    Month-based intervals are always stepped from `start` itself, so
    Jan 31 + 1 month = Feb 28 (29 in leap years) and + 2 months = Mar 31.

    Raises:
        InvalidIntervalError: unknown interval, or custom_days without interval_days > 0
    """
    validate_interval(interval, interval_days)
    start = to_utc(start)

    if interval == "weekly":
        return start + timedelta(days=7 * n)
    if interval in MONTHS_PER_INTERVAL:
        return add_months(start, MONTHS_PER_INTERVAL[interval] * n)
    return start + timedelta(days=interval_days * n)
