"""Order API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from workload.utils.time import as_utc


class OrderCreate(BaseModel):
    """Submit an order for the current week."""

    notes: str | None = Field(default=None, max_length=2000)


class OrderResponse(BaseModel):
    """Serialized order."""

    id: int
    status: str
    week_start: datetime
    notes: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("week_start", "created_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class OrderSubmitResponse(BaseModel):
    """Order plus the capacity left after admitting it."""

    order: OrderResponse
    remaining: int
