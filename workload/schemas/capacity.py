"""Weekly capacity API schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class CapacityUpdate(BaseModel):
    """Admin payload for changing this week's capacity.

    Range is checked by the service so the error carries the field name.
    """

    weekly_capacity: int


class SimulateWeekRequest(BaseModel):
    target_date: date


class WeekRecordResponse(BaseModel):
    """Serialized week capacity record."""

    week_start: datetime
    weekly_capacity: int
    orders_count: int
    remaining: int

    model_config = ConfigDict(from_attributes=True)


class WeeklyCapacityResponse(BaseModel):
    """Current week's capacity for the admin workload screen."""

    weekly_capacity: int
    orders_count: int
    remaining: int
    week_start: datetime
    next_week_start: datetime
    next_week_start_label: str


class CapacityAvailabilityResponse(BaseModel):
    """Customer-facing availability for the review step."""

    available: bool
    is_almost_full: bool
    is_full: bool
    remaining: int
    weekly_capacity: int
    orders_count: int
    week_start: datetime
    next_week_start: datetime
    next_availability: str
    next_availability_label: str
