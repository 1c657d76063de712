"""Order endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from workload.core.security import get_current_user
from workload.db.session import get_db
from workload.models.order import ORDER_STATUS_SUBMITTED, Order
from workload.models.user import User
from workload.schemas.order import OrderCreate, OrderResponse, OrderSubmitResponse
from workload.services.capacity_ledger import AdmissionDecision, CapacityLedger
from workload.services.capacity_store import CapacityStore
from workload.services.clock import Clock, get_clock
from workload.utils.time import as_utc, format_next_availability, format_next_availability_datetime

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=OrderSubmitResponse, status_code=status.HTTP_201_CREATED)
def submit_order(
    payload: OrderCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: User = Depends(get_current_user),
) -> OrderSubmitResponse:
    """Admit the order against this week's capacity, then record it."""
    decision: AdmissionDecision = CapacityLedger(CapacityStore(db), clock).admit()
    if not decision.allowed:
        next_week_start = clock.next_week_start()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": "Weekly capacity reached, try next week.",
                "next_availability": format_next_availability(next_week_start, clock.now().date()),
                "next_availability_label": format_next_availability_datetime(next_week_start),
            },
        )

    order = Order(
        user_id=current_user.id,
        week_start=as_utc(decision.week_start),
        status=ORDER_STATUS_SUBMITTED,
        notes=payload.notes,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info("[ORDERS] Order %s admitted for week %s", order.id, decision.week_start.isoformat())
    return OrderSubmitResponse(order=OrderResponse.model_validate(order), remaining=decision.remaining)


@router.get("", response_model=list[OrderResponse])
def list_my_orders(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[Order]:
    return db.scalars(
        select(Order).where(Order.user_id == current_user.id).order_by(Order.created_at.desc(), Order.id.desc())
    ).all()
