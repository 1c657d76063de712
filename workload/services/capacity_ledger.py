"""Order admission against the active week's capacity."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from workload.core.config import settings
from workload.services.capacity_store import CapacityStore, WeekRecord
from workload.services.clock import Clock
from workload.services.exceptions import (
    CapacityExceededError,
    InvalidCapacityError,
    WeekAlreadyExistsError,
    WeekNotFoundError,
)
from workload.utils.time import as_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdmissionDecision:
    """Outcome of a single admission attempt."""

    allowed: bool
    remaining: int
    week_start: datetime


@dataclass(frozen=True)
class CapacityAvailability:
    """Customer-facing view of the current week's capacity."""

    available: bool
    is_almost_full: bool
    is_full: bool
    remaining: int
    weekly_capacity: int
    orders_count: int
    week_start: datetime
    next_week_start: datetime


class CapacityLedger:
    """Decides whether an order may be admitted and records the admission.

    Week records are created lazily: a week with no record inherits the
    capacity of the most recent earlier week, or ``default_capacity``.
    """

    def __init__(
        self,
        store: CapacityStore,
        clock: Clock,
        *,
        default_capacity: int | None = None,
        almost_full_threshold: int | None = None,
    ) -> None:
        self.store = store
        self.clock = clock
        if default_capacity is None:
            default_capacity = settings.default_weekly_capacity
        if isinstance(default_capacity, bool) or not isinstance(default_capacity, int) or default_capacity < 1:
            raise InvalidCapacityError(default_capacity)
        self.default_capacity = default_capacity
        self.almost_full_threshold = (
            settings.almost_full_threshold if almost_full_threshold is None else almost_full_threshold
        )

    def inherited_capacity(self, week_start: datetime) -> int:
        previous = self.store.latest_before(week_start)
        if previous is None:
            return self.default_capacity
        return previous.weekly_capacity

    def ensure_week(self, week_start: datetime, *, commit: bool = True) -> WeekRecord:
        """Return the record for ``week_start``, creating it if absent.

        With ``commit=False`` a newly created row is only flushed.
        """
        record = self.store.get(week_start)
        if record is not None:
            return record
        try:
            return self.store.create(week_start, self.inherited_capacity(week_start), commit=commit)
        except WeekAlreadyExistsError:
            logger.info("[CAPACITY] Week %s created concurrently; re-reading", week_start.isoformat())
        record = self.store.get(week_start)
        if record is None:
            raise WeekNotFoundError(week_start)
        return record

    def admit(self) -> AdmissionDecision:
        """Count one order against the current week if capacity allows."""
        week_start = self.clock.current_week_start()
        record = self.ensure_week(week_start)
        if record.is_full:
            logger.info(
                "[CAPACITY] Refused admission for week %s (%s/%s)",
                week_start.isoformat(),
                record.orders_count,
                record.weekly_capacity,
            )
            return AdmissionDecision(allowed=False, remaining=0, week_start=week_start)

        try:
            updated = self.store.increment_count(week_start)
        except CapacityExceededError:
            logger.info("[CAPACITY] Week %s filled up during admission", week_start.isoformat())
            return AdmissionDecision(allowed=False, remaining=0, week_start=week_start)

        return AdmissionDecision(allowed=True, remaining=updated.remaining, week_start=week_start)

    def availability(self) -> CapacityAvailability:
        week_start = self.clock.current_week_start()
        record = self.ensure_week(week_start)
        remaining = record.remaining
        return CapacityAvailability(
            available=remaining > 0,
            is_almost_full=0 < remaining <= self.almost_full_threshold,
            is_full=remaining <= 0,
            remaining=remaining,
            weekly_capacity=record.weekly_capacity,
            orders_count=record.orders_count,
            week_start=as_utc(week_start),
            next_week_start=as_utc(self.clock.next_week_start()),
        )

    def simulate_week(self, target: date | datetime, *, commit: bool = True) -> WeekRecord:
        """Materialize the record for the week containing ``target``."""
        if not isinstance(target, datetime):
            target = datetime.combine(target, self.clock.week_start_time, tzinfo=self.clock.tz)
        return self.ensure_week(self.clock.week_start_for(target), commit=commit)
