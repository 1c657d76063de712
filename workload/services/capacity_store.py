"""Durable weekly capacity records with atomic count updates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from workload.models.weekly_capacity import WeeklyCapacity
from workload.services.exceptions import (
    CapacityExceededError,
    InvalidCapacityError,
    InvalidCountError,
    WeekAlreadyExistsError,
    WeekNotFoundError,
)
from workload.utils.time import as_utc

logger = logging.getLogger(__name__)

_RECORD_COLUMNS = (
    WeeklyCapacity.week_start,
    WeeklyCapacity.weekly_capacity,
    WeeklyCapacity.orders_count,
    WeeklyCapacity.created_at,
    WeeklyCapacity.updated_at,
)


@dataclass(frozen=True)
class WeekRecord:
    """Snapshot of one week's capacity row."""

    week_start: datetime
    weekly_capacity: int
    orders_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def remaining(self) -> int:
        return max(0, self.weekly_capacity - self.orders_count)

    @property
    def is_full(self) -> bool:
        return self.orders_count >= self.weekly_capacity

    def as_dict(self) -> dict[str, int | str]:
        return {
            "week_start": self.week_start.isoformat(),
            "weekly_capacity": self.weekly_capacity,
            "orders_count": self.orders_count,
        }


def _to_record(row) -> WeekRecord:
    return WeekRecord(
        week_start=as_utc(row.week_start),
        weekly_capacity=row.weekly_capacity,
        orders_count=row.orders_count,
        created_at=as_utc(row.created_at) if row.created_at is not None else None,
        updated_at=as_utc(row.updated_at) if row.updated_at is not None else None,
    )


def _validate_capacity(capacity: object) -> int:
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
        raise InvalidCapacityError(capacity)
    return capacity


class CapacityStore:
    """Reads and writes ``workload_capacity`` rows through one session.

    Every mutation is a single statement followed by a commit, so concurrent
    callers on separate sessions are serialized by the database. Passing
    ``commit=False`` only flushes, leaving the caller to commit the change
    together with its own rows.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, week_start: datetime) -> WeekRecord | None:
        row = self.db.execute(
            select(*_RECORD_COLUMNS).where(WeeklyCapacity.week_start == as_utc(week_start)).limit(1)
        ).first()
        return _to_record(row) if row is not None else None

    def latest_before(self, week_start: datetime) -> WeekRecord | None:
        row = self.db.execute(
            select(*_RECORD_COLUMNS)
            .where(WeeklyCapacity.week_start < as_utc(week_start))
            .order_by(WeeklyCapacity.week_start.desc())
            .limit(1)
        ).first()
        return _to_record(row) if row is not None else None

    def history(self, limit: int = 12) -> list[WeekRecord]:
        rows = self.db.execute(
            select(*_RECORD_COLUMNS).order_by(WeeklyCapacity.week_start.desc()).limit(limit)
        ).all()
        return [_to_record(row) for row in rows]

    def create(self, week_start: datetime, capacity: int, *, commit: bool = True) -> WeekRecord:
        _validate_capacity(capacity)
        row = WeeklyCapacity(week_start=as_utc(week_start), weekly_capacity=capacity, orders_count=0)
        self.db.add(row)
        try:
            if commit:
                self.db.commit()
            else:
                self.db.flush()
        except IntegrityError as exc:
            self.db.rollback()
            raise WeekAlreadyExistsError(week_start) from exc
        logger.info("[CAPACITY] Created week %s with capacity %s", week_start.isoformat(), capacity)
        record = self.get(week_start)
        if record is None:
            raise WeekNotFoundError(week_start)
        return record

    def increment_count(self, week_start: datetime) -> WeekRecord:
        """Add one admitted order, only while the week is below capacity."""
        row = self._execute_update(
            update(WeeklyCapacity)
            .where(
                WeeklyCapacity.week_start == as_utc(week_start),
                WeeklyCapacity.orders_count < WeeklyCapacity.weekly_capacity,
            )
            .values(
                orders_count=WeeklyCapacity.orders_count + 1,
                updated_at=datetime.now(timezone.utc),
            )
        )
        if row is not None:
            return row
        if self.get(week_start) is None:
            raise WeekNotFoundError(week_start)
        raise CapacityExceededError(week_start)

    def set_capacity(self, week_start: datetime, capacity: int, *, commit: bool = True) -> WeekRecord:
        _validate_capacity(capacity)
        row = self._execute_update(
            update(WeeklyCapacity)
            .where(WeeklyCapacity.week_start == as_utc(week_start))
            .values(weekly_capacity=capacity, updated_at=datetime.now(timezone.utc)),
            commit=commit,
        )
        if row is None:
            raise WeekNotFoundError(week_start)
        return row

    def set_count(self, week_start: datetime, count: int, *, commit: bool = True) -> WeekRecord:
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise InvalidCountError(count)
        row = self._execute_update(
            update(WeeklyCapacity)
            .where(WeeklyCapacity.week_start == as_utc(week_start))
            .values(orders_count=count, updated_at=datetime.now(timezone.utc)),
            commit=commit,
        )
        if row is None:
            raise WeekNotFoundError(week_start)
        return row

    def _execute_update(self, statement, *, commit: bool = True) -> WeekRecord | None:
        try:
            row = self.db.execute(
                statement.returning(*_RECORD_COLUMNS).execution_options(synchronize_session=False)
            ).first()
            if commit:
                self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return _to_record(row) if row is not None else None
