"""Schema exports."""

from workload.schemas.auth import AuthUserResponse, LoginRequest, RegisterRequest, TokenResponse
from workload.schemas.capacity import (
    CapacityAvailabilityResponse,
    CapacityUpdate,
    SimulateWeekRequest,
    WeeklyCapacityResponse,
    WeekRecordResponse,
)
from workload.schemas.order import OrderCreate, OrderResponse, OrderSubmitResponse

__all__ = [
    "AuthUserResponse",
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "CapacityAvailabilityResponse",
    "CapacityUpdate",
    "SimulateWeekRequest",
    "WeeklyCapacityResponse",
    "WeekRecordResponse",
    "OrderCreate",
    "OrderResponse",
    "OrderSubmitResponse",
]
