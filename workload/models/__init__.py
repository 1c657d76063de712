"""Application models package."""

from workload.models.audit_log import AuditLog
from workload.models.order import Order
from workload.models.user import User
from workload.models.weekly_capacity import WeeklyCapacity

__all__ = ["AuditLog", "Order", "User", "WeeklyCapacity"]
