"""Audit log helpers."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from workload.models import AuditLog, User
from workload.utils.time import as_utc


def log_action(
    db: Session,
    *,
    actor: User | None,
    action_type: str,
    week_start: datetime | None = None,
    before_snapshot: dict[str, Any] | None = None,
    after_snapshot: dict[str, Any] | None = None,
) -> None:
    actor_identifier = "anonymous"
    actor_id = None
    if actor is not None:
        actor_id = actor.id
        actor_identifier = actor.email or actor.username

    db.add(
        AuditLog(
            actor_user_id=actor_id,
            actor_identifier=actor_identifier,
            action_type=action_type,
            week_start=as_utc(week_start) if week_start is not None else None,
            before_snapshot=before_snapshot,
            after_snapshot=after_snapshot,
        )
    )
