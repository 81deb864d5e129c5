# -*- coding: utf-8 -*-
"""Temporal policy — due-date classification and recurrence advance.

Pure functions; callers always pass `now`. Every value is normalized to UTC
before comparison so that a due date and "now" never drift across timezones.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from .config import settings
from .errors import ValidationError

DateLike = Union[datetime, date]


class DueStatus(str, Enum):
    overdue = "overdue"
    due_soon = "due_soon"
    up_to_date = "up_to_date"
    no_date = "no_date"


class Frequency(str, Enum):
    once = "once"
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"


_STEPS = {
    Frequency.daily: relativedelta(days=1),
    Frequency.weekly: relativedelta(days=7),
    # relativedelta clamps to the last day of shorter months (Jan 31 -> Feb 28/29)
    # and Feb 29 -> Feb 28 on non-leap years.
    Frequency.monthly: relativedelta(months=1),
    Frequency.yearly: relativedelta(years=1),
}


def to_utc(value: DateLike) -> datetime:
    """Normalize a date/datetime to an aware UTC datetime (naive = UTC)."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    raise TypeError(f"expected date or datetime, got {type(value).__name__}")


def iso(value: Optional[DateLike]) -> Optional[str]:
    if value is None:
        return None
    # Fixed width: stored values compare correctly as text.
    return to_utc(value).isoformat(timespec="microseconds")


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return to_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def classify(due_date: Optional[DateLike], now: DateLike, *, window_days: Optional[int] = None) -> DueStatus:
    if due_date is None:
        return DueStatus.no_date
    window = timedelta(days=settings.due_soon_days if window_days is None else window_days)
    delta = to_utc(due_date) - to_utc(now)
    if delta < timedelta(0):
        return DueStatus.overdue
    if delta <= window:
        return DueStatus.due_soon
    return DueStatus.up_to_date


def advance(due_date: DateLike, frequency: Optional[Union[Frequency, str]]) -> datetime:
    if frequency is None:
        raise ValidationError("cannot advance a reminder without a frequency", field="frequency")
    freq = Frequency(frequency)
    step = _STEPS.get(freq)
    if step is None:
        raise ValidationError("one-off reminders do not recur", field="frequency", value=freq.value)
    return to_utc(due_date) + step


def days_until(due_date: DateLike, now: DateLike) -> int:
    """Whole days from `now` to `due_date` (negative once overdue), floored."""
    delta = to_utc(due_date) - to_utc(now)
    return delta.days
