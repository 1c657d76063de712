"""Administrative capacity operations for the workload screen."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy.orm import Session

from workload.models import User
from workload.services.audit_service import log_action
from workload.services.capacity_ledger import CapacityLedger
from workload.services.capacity_store import CapacityStore, WeekRecord
from workload.services.exceptions import InvalidCapacityError, WeekAlreadyExistsError
from workload.utils.time import as_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeeklyCapacitySummary:
    """Current week's capacity as shown to admins."""

    weekly_capacity: int
    orders_count: int
    remaining: int
    week_start: datetime
    next_week_start: datetime


class AdminCapacityController:
    """Read/update operations on weekly capacity for an authorized admin.

    Authorization happens before construction; ``actor`` is recorded in the
    audit trail for every change.
    """

    def __init__(self, db: Session, ledger: CapacityLedger, *, actor: User | None) -> None:
        self.db = db
        self.ledger = ledger
        self.store: CapacityStore = ledger.store
        self.clock = ledger.clock
        self.actor = actor

    def get_weekly_capacity(self) -> WeeklyCapacitySummary:
        week_start = self.clock.current_week_start()
        record = self.ledger.ensure_week(week_start)
        return WeeklyCapacitySummary(
            weekly_capacity=record.weekly_capacity,
            orders_count=record.orders_count,
            remaining=record.remaining,
            week_start=as_utc(week_start),
            next_week_start=as_utc(self.clock.next_week_start()),
        )

    def update_weekly_capacity(self, new_capacity: int) -> WeekRecord:
        if isinstance(new_capacity, bool) or not isinstance(new_capacity, int) or new_capacity < 1:
            raise InvalidCapacityError(new_capacity)
        week_start = self.clock.current_week_start()
        before = self.ledger.ensure_week(week_start)
        after = self.store.set_capacity(week_start, new_capacity, commit=False)
        self._audit("capacity.update", week_start, before, after)
        logger.info(
            "[ADMIN] Weekly capacity for %s changed %s -> %s",
            week_start.isoformat(),
            before.weekly_capacity,
            after.weekly_capacity,
        )
        return after

    def reset_current_week_count(self) -> WeekRecord:
        week_start = self.clock.current_week_start()
        before = self.ledger.ensure_week(week_start)
        after = self.store.set_count(week_start, 0, commit=False)
        self._audit("capacity.reset_count", week_start, before, after)
        logger.info("[ADMIN] Orders count for %s reset from %s", week_start.isoformat(), before.orders_count)
        return after

    def create_next_week_capacity(self) -> WeekRecord:
        """Create next week's record ahead of the natural rollover."""
        current = self.ledger.ensure_week(self.clock.current_week_start())
        next_week_start = self.clock.next_week_start()
        if self.store.get(next_week_start) is not None:
            raise WeekAlreadyExistsError(next_week_start)
        created = self.store.create(next_week_start, current.weekly_capacity, commit=False)
        self._audit("capacity.create_next_week", next_week_start, None, created)
        logger.info(
            "[ADMIN] Created next week %s with capacity %s",
            next_week_start.isoformat(),
            created.weekly_capacity,
        )
        return created

    def simulate_week(self, target_date: date) -> WeekRecord:
        record = self.ledger.simulate_week(target_date, commit=False)
        self._audit("capacity.simulate_week", record.week_start, None, record)
        return record

    def capacity_history(self, limit: int = 12) -> list[WeekRecord]:
        return self.store.history(limit)

    def _audit(self, action_type: str, week_start: datetime, before: WeekRecord | None, after: WeekRecord) -> None:
        """Write the audit row and commit it together with the pending change."""
        try:
            log_action(
                self.db,
                actor=self.actor,
                action_type=action_type,
                week_start=week_start,
                before_snapshot=before.as_dict() if before is not None else None,
                after_snapshot=after.as_dict(),
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
