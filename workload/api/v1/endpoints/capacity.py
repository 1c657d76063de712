"""Customer-facing capacity endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from workload.core.security import get_current_user
from workload.db.session import get_db
from workload.models.user import User
from workload.schemas.capacity import CapacityAvailabilityResponse
from workload.services.capacity_ledger import CapacityLedger
from workload.services.capacity_store import CapacityStore
from workload.services.clock import Clock, get_clock
from workload.utils.time import format_next_availability, format_next_availability_datetime

router: APIRouter = APIRouter()


@router.get("/availability", response_model=CapacityAvailabilityResponse)
def get_availability(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: User = Depends(get_current_user),
) -> CapacityAvailabilityResponse:
    """Report whether this week can still take orders."""
    ledger = CapacityLedger(CapacityStore(db), clock)
    info = ledger.availability()
    return CapacityAvailabilityResponse(
        available=info.available,
        is_almost_full=info.is_almost_full,
        is_full=info.is_full,
        remaining=info.remaining,
        weekly_capacity=info.weekly_capacity,
        orders_count=info.orders_count,
        week_start=info.week_start,
        next_week_start=info.next_week_start,
        next_availability=format_next_availability(info.next_week_start, clock.now().date()),
        next_availability_label=format_next_availability_datetime(info.next_week_start),
    )
