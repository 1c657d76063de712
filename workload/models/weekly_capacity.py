"""Weekly order capacity ORM model."""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from workload.db.base import Base


class WeeklyCapacity(Base):
    """Capacity and admitted order count for one week window.

    ``week_start`` is the Monday 09:00 business-time boundary, stored in UTC.
    """

    __tablename__ = "workload_capacity"

    id: Mapped[int] = mapped_column(primary_key=True)
    week_start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    weekly_capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    orders_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("uq_workload_capacity_week_start", "week_start", unique=True),
        CheckConstraint("weekly_capacity >= 1", name="ck_workload_capacity_positive"),
        CheckConstraint("orders_count >= 0", name="ck_workload_orders_non_negative"),
    )
