"""Admin endpoints for weekly workload capacity."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from workload.core.security import require_admin
from workload.db.session import get_db
from workload.models.user import User
from workload.schemas.capacity import (
    CapacityUpdate,
    SimulateWeekRequest,
    WeeklyCapacityResponse,
    WeekRecordResponse,
)
from workload.services.admin_capacity import AdminCapacityController
from workload.services.capacity_ledger import CapacityLedger
from workload.services.capacity_store import CapacityStore, WeekRecord
from workload.services.clock import Clock, get_clock
from workload.services.exceptions import InvalidCapacityError, WeekAlreadyExistsError
from workload.utils.time import format_next_week_start_for_admin

router = APIRouter()


def get_admin_controller(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    admin: User = Depends(require_admin),
) -> AdminCapacityController:
    return AdminCapacityController(db, CapacityLedger(CapacityStore(db), clock), actor=admin)


def _record_response(record: WeekRecord) -> WeekRecordResponse:
    return WeekRecordResponse.model_validate(record)


@router.get("/capacity", response_model=WeeklyCapacityResponse)
def get_weekly_capacity(
    controller: AdminCapacityController = Depends(get_admin_controller),
) -> WeeklyCapacityResponse:
    summary = controller.get_weekly_capacity()
    return WeeklyCapacityResponse(
        weekly_capacity=summary.weekly_capacity,
        orders_count=summary.orders_count,
        remaining=summary.remaining,
        week_start=summary.week_start,
        next_week_start=summary.next_week_start,
        next_week_start_label=format_next_week_start_for_admin(summary.next_week_start),
    )


@router.put("/capacity", response_model=WeekRecordResponse)
def update_weekly_capacity(
    payload: CapacityUpdate,
    controller: AdminCapacityController = Depends(get_admin_controller),
) -> WeekRecordResponse:
    try:
        record = controller.update_weekly_capacity(payload.weekly_capacity)
    except InvalidCapacityError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"field": exc.field, "message": str(exc)},
        ) from exc
    return _record_response(record)


@router.post("/capacity/reset", response_model=WeekRecordResponse)
def reset_current_week_count(
    controller: AdminCapacityController = Depends(get_admin_controller),
) -> WeekRecordResponse:
    return _record_response(controller.reset_current_week_count())


@router.post("/capacity/next-week", response_model=WeekRecordResponse, status_code=status.HTTP_201_CREATED)
def create_next_week_capacity(
    controller: AdminCapacityController = Depends(get_admin_controller),
) -> WeekRecordResponse:
    try:
        record = controller.create_next_week_capacity()
    except WeekAlreadyExistsError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Next week's capacity already exists") from exc
    return _record_response(record)


@router.post("/capacity/simulate", response_model=WeekRecordResponse)
def simulate_week(
    payload: SimulateWeekRequest,
    controller: AdminCapacityController = Depends(get_admin_controller),
) -> WeekRecordResponse:
    return _record_response(controller.simulate_week(payload.target_date))


@router.get("/capacity/history", response_model=list[WeekRecordResponse])
def capacity_history(
    limit: int = Query(default=12, ge=1, le=104),
    controller: AdminCapacityController = Depends(get_admin_controller),
) -> list[WeekRecordResponse]:
    return [_record_response(record) for record in controller.capacity_history(limit)]
