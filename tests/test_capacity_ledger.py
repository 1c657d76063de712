"""Admission control tests for the weekly capacity ledger."""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.sql.dml import Update

from workload.core.config import settings
from workload.db.base import Base
from workload.models import WeeklyCapacity
from workload.services.capacity_ledger import CapacityLedger
from workload.services.capacity_store import CapacityStore
from workload.services.clock import Clock
from workload.services.exceptions import InvalidCapacityError

# Wednesday 2026-01-07 04:00 Pacific; week starts Monday 2026-01-05 17:00 UTC.
NOW = datetime(2026, 1, 7, 12, 0, tzinfo=timezone.utc)
WEEK = datetime(2026, 1, 5, 17, 0, tzinfo=timezone.utc)


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _session_factory(tmp_path: Path, name: str) -> sessionmaker:
    engine = _build_test_engine(tmp_path / name)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _clock(moment: datetime = NOW) -> Clock:
    return Clock("America/Los_Angeles", now_func=lambda: moment)


def _ledger(db, clock: Clock | None = None, default_capacity: int = 50) -> CapacityLedger:
    return CapacityLedger(CapacityStore(db), clock or _clock(), default_capacity=default_capacity)


def test_capacity_of_one_admits_exactly_one(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "ledger_one.db")
    with session_local() as db:
        CapacityStore(db).create(WEEK, 1)

        first = _ledger(db).admit()
        second = _ledger(db).admit()

    assert first.allowed is True
    assert first.remaining == 0
    assert second.allowed is False
    assert second.remaining == 0


def test_first_admission_creates_week_with_default_capacity(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "ledger_default.db")
    with session_local() as db:
        decision = _ledger(db, default_capacity=50).admit()
        record = CapacityStore(db).get(WEEK)

    assert decision.allowed is True
    assert decision.remaining == 49
    assert decision.week_start == WEEK
    assert record.weekly_capacity == 50
    assert record.orders_count == 1


def test_new_week_inherits_most_recent_prior_capacity(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "ledger_inherit.db")
    with session_local() as db:
        store = CapacityStore(db)
        store.create(WEEK - timedelta(days=14), 12)
        store.create(WEEK - timedelta(days=7), 25)
        store.set_count(WEEK - timedelta(days=7), 25)

        decision = _ledger(db).admit()
        record = store.get(WEEK)

    assert decision.allowed is True
    assert record.weekly_capacity == 25
    assert record.orders_count == 1


def test_full_week_refusal_does_not_mutate(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "ledger_full.db")
    with session_local() as db:
        store = CapacityStore(db)
        store.create(WEEK, 3)
        store.set_count(WEEK, 3)

        decision = _ledger(db).admit()
        record = store.get(WEEK)

    assert decision.allowed is False
    assert record.orders_count == 3


def test_week_is_fixed_for_the_whole_admission(tmp_path: Path) -> None:
    """Crossing the Monday boundary mid-request must not split the admission."""
    session_local = _session_factory(tmp_path, "ledger_boundary.db")
    before_boundary = datetime(2026, 1, 12, 16, 59, 59, tzinfo=timezone.utc)
    after_boundary = datetime(2026, 1, 12, 17, 0, 1, tzinfo=timezone.utc)
    instants = iter([before_boundary])

    clock = Clock("America/Los_Angeles", now_func=lambda: next(instants, after_boundary))
    with session_local() as db:
        decision = _ledger(db, clock=clock).admit()
        store = CapacityStore(db)
        this_week = store.get(WEEK)
        next_week = store.get(WEEK + timedelta(days=7))

    assert decision.week_start == WEEK
    assert this_week.orders_count == 1
    assert next_week is None


def test_lost_creation_race_rereads_existing_week(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "ledger_race.db")
    with session_local() as db:
        store = CapacityStore(db)
        store.create(WEEK, 7)
        real_get = store.get
        calls = {"count": 0}

        def stale_first_get(week_start):
            calls["count"] += 1
            if calls["count"] == 1:
                return None
            return real_get(week_start)

        store.get = stale_first_get
        ledger = CapacityLedger(store, _clock(), default_capacity=50)

        record = ledger.ensure_week(WEEK)

    assert record.weekly_capacity == 7
    assert calls["count"] == 2


def test_concurrent_admissions_never_oversell(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "ledger_concurrent.db")
    with session_local() as db:
        CapacityStore(db).create(WEEK, 5)

    workers = 16
    barrier = threading.Barrier(workers)

    def attempt(_: int) -> bool:
        barrier.wait()
        with session_local() as db:
            return _ledger(db).admit().allowed

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(attempt, range(workers)))

    with session_local() as db:
        record = CapacityStore(db).get(WEEK)

    assert results.count(True) == 5
    assert record.orders_count == 5


def test_concurrent_first_requests_create_one_week_record(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "ledger_concurrent_create.db")
    workers = 8
    barrier = threading.Barrier(workers)

    def attempt(_: int) -> bool:
        barrier.wait()
        with session_local() as db:
            return _ledger(db, default_capacity=3).admit().allowed

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(attempt, range(workers)))

    with session_local() as db:
        rows = db.scalar(select(func.count()).select_from(WeeklyCapacity))
        record = CapacityStore(db).get(WEEK)

    assert rows == 1
    assert results.count(True) == 3
    assert record.orders_count == 3


def test_availability_flags_almost_full(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "ledger_availability.db")
    with session_local() as db:
        store = CapacityStore(db)
        store.create(WEEK, 10)
        store.set_count(WEEK, 8)
        ledger = CapacityLedger(store, _clock(), almost_full_threshold=3)

        almost = ledger.availability()
        store.set_count(WEEK, 10)
        full = ledger.availability()

    assert almost.available is True
    assert almost.is_almost_full is True
    assert almost.remaining == 2
    assert almost.next_week_start == datetime(2026, 1, 12, 17, 0, tzinfo=timezone.utc)
    assert almost.week_start.utcoffset() == timedelta(0)
    assert almost.next_week_start.utcoffset() == timedelta(0)
    assert full.available is False
    assert full.is_full is True
    assert full.is_almost_full is False


def test_simulate_week_materializes_target_week(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "ledger_simulate.db")
    with session_local() as db:
        CapacityStore(db).create(WEEK, 30)
        record = _ledger(db).simulate_week(datetime(2026, 2, 4).date())

    assert record.week_start == datetime(2026, 2, 2, 17, 0, tzinfo=timezone.utc)
    assert record.weekly_capacity == 30
    assert record.orders_count == 0


def test_database_failure_during_admission_propagates(tmp_path: Path, monkeypatch) -> None:
    session_local = _session_factory(tmp_path, "ledger_db_failure.db")
    with session_local() as db:
        store = CapacityStore(db)
        store.create(WEEK, 5)
        real_execute = db.execute
        failures = []

        def execute_failing_once(statement, *args, **kwargs):
            if isinstance(statement, Update) and not failures:
                failures.append(statement)
                raise OperationalError("UPDATE workload_capacity", {}, Exception("database is locked"))
            return real_execute(statement, *args, **kwargs)

        monkeypatch.setattr(db, "execute", execute_failing_once)

        with pytest.raises(OperationalError):
            _ledger(db).admit()

        record = store.get(WEEK)
        retry = _ledger(db).admit()

    assert len(failures) == 1
    assert record.orders_count == 0
    assert retry.allowed is True
    assert retry.remaining == 4


def test_explicit_zero_default_capacity_is_rejected(tmp_path: Path) -> None:
    session_local = _session_factory(tmp_path, "ledger_zero_default.db")
    with session_local() as db:
        with pytest.raises(InvalidCapacityError):
            CapacityLedger(CapacityStore(db), _clock(), default_capacity=0)

        ledger = CapacityLedger(CapacityStore(db), _clock())

    assert ledger.default_capacity == settings.default_weekly_capacity
