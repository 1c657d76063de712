"""Weekly capacity domain errors."""

from __future__ import annotations

from datetime import datetime


class CapacityError(Exception):
    """Base class for capacity control errors."""


class WeekNotFoundError(CapacityError):
    """Raised when no capacity record exists for a week."""

    def __init__(self, week_start: datetime) -> None:
        self.week_start = week_start
        super().__init__(f"No capacity record for week starting {week_start.isoformat()}")


class WeekAlreadyExistsError(CapacityError):
    """Raised when creating a capacity record for a week that already has one."""

    def __init__(self, week_start: datetime) -> None:
        self.week_start = week_start
        super().__init__(f"Capacity record already exists for week starting {week_start.isoformat()}")


class InvalidCapacityError(CapacityError):
    """Raised when a weekly capacity is not a positive integer."""

    field = "weekly_capacity"

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__("Weekly capacity must be a whole number of at least 1.")


class InvalidCountError(CapacityError):
    """Raised when an orders count override is negative."""

    field = "orders_count"

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__("Orders count cannot be negative.")


class CapacityExceededError(CapacityError):
    """Raised by the store when a conditional increment finds the week full."""

    def __init__(self, week_start: datetime) -> None:
        self.week_start = week_start
        super().__init__(f"Weekly capacity reached for week starting {week_start.isoformat()}")
