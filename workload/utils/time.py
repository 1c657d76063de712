"""Time helpers for storing week boundaries and rendering availability labels."""

from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from workload.core.config import settings


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    SQLite drops tzinfo on the way back out, so naive values read from the
    database are taken to be UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_business_time(value: datetime) -> datetime:
    """Return ``value`` in the business timezone; naive values are taken as UTC."""
    return as_utc(value).astimezone(ZoneInfo(settings.business_timezone))


def _clock_label(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {meridiem} {moment.strftime('%Z')}"


def format_next_availability_datetime(next_week_start: datetime | None) -> str:
    """Format as ``Monday, January 15 at 9:00 AM PST``."""
    if next_week_start is None:
        return "soon"
    next_week_start = to_business_time(next_week_start)
    return f"{next_week_start.strftime('%A, %B')} {next_week_start.day} at {_clock_label(next_week_start)}"


def format_next_week_start_for_admin(next_week_start: datetime | None) -> str:
    """Format as ``Monday at 9:00 AM PST`` for the admin capacity screen."""
    if next_week_start is None:
        return "Monday at 9:00 AM PST"
    next_week_start = to_business_time(next_week_start)
    return f"{next_week_start.strftime('%A')} at {_clock_label(next_week_start)}"


def format_next_availability(next_week_start: datetime | date | None, today: date) -> str:
    """Describe how far away the next week window is, relative to ``today``."""
    if next_week_start is None:
        return "soon"
    target: date = to_business_time(next_week_start).date() if isinstance(next_week_start, datetime) else next_week_start
    days = (target - today).days
    if days <= 0:
        return "today"
    if days == 1:
        return "tomorrow"
    if days <= 7:
        return f"in {days} days"
    label = f"{target.strftime('%b')} {target.day}"
    if target.year != today.year:
        label = f"{label}, {target.year}"
    return label
