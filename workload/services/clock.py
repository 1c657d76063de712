"""Business-time clock and week window arithmetic."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from workload.core.config import settings


def _current_utc_datetime() -> datetime:
    return datetime.now(timezone.utc)


class Clock:
    """Supplies the current instant and week boundaries in the business timezone.

    A week window opens on ``week_start_weekday`` (0 = Monday) at
    ``week_start_time`` local time and lasts seven days.
    """

    def __init__(
        self,
        tz_name: str | None = None,
        *,
        week_start_weekday: int | None = None,
        week_start_time: time | None = None,
        now_func: Callable[[], datetime] | None = None,
    ) -> None:
        self.tz = ZoneInfo(tz_name or settings.business_timezone)
        self.week_start_weekday = settings.week_start_weekday if week_start_weekday is None else week_start_weekday
        self.week_start_time = week_start_time or settings.week_start_time
        self._now_func = now_func

    def now(self) -> datetime:
        current = self._now_func() if self._now_func is not None else _current_utc_datetime()
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        return current.astimezone(self.tz)

    def week_start_for(self, moment: datetime) -> datetime:
        """Return the week boundary at or before ``moment``."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=self.tz)
        local = moment.astimezone(self.tz)
        days_back = (local.weekday() - self.week_start_weekday) % 7
        boundary_date = local.date() - timedelta(days=days_back)
        boundary = datetime.combine(boundary_date, self.week_start_time, tzinfo=self.tz)
        if boundary > local:
            boundary = datetime.combine(boundary_date - timedelta(days=7), self.week_start_time, tzinfo=self.tz)
        return boundary

    def current_week_start(self) -> datetime:
        return self.week_start_for(self.now())

    def next_week_start(self) -> datetime:
        # Same-tzinfo arithmetic is wall-clock, so DST shifts keep 09:00 local.
        return self.current_week_start() + timedelta(days=7)


def get_clock() -> Clock:
    """FastAPI dependency returning a clock built from settings."""
    return Clock()
