"""Account provisioning helpers."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from workload.core.config import settings
from workload.core.security import get_password_hash, verify_password
from workload.models import User
from workload.services.user_service import create_user

logger = logging.getLogger(__name__)


def ensure_default_admin(db: Session) -> bool:
    """Ensure the admin configured by ``ADMIN_USER``/``ADMIN_PASS`` exists and is active.

    Returns:
        bool: True when an admin account is present after this call.
    """
    if not settings.admin_user or not settings.admin_pass:
        logger.info("[BOOTSTRAP] ADMIN_USER/ADMIN_PASS not set; skipping admin bootstrap.")
        return db.scalar(select(User.id).where(User.role == "ADMIN").limit(1)) is not None

    existing_admin = db.scalar(select(User).where(User.username == settings.admin_user).limit(1))
    if existing_admin is not None:
        updates_applied = False
        if not existing_admin.is_active:
            existing_admin.is_active = True
            updates_applied = True
            logger.info("[BOOTSTRAP] Admin exists but was inactive; account re-activated.")
        if existing_admin.role != "ADMIN":
            logger.warning(
                "[BOOTSTRAP] Promoting configured admin username=%s (old role=%s).",
                existing_admin.username,
                existing_admin.role,
            )
            existing_admin.role = "ADMIN"
            updates_applied = True
        if updates_applied:
            db.commit()
        return True

    create_user(
        db=db,
        username=settings.admin_user,
        hashed_password=get_password_hash(settings.admin_pass),
        role="ADMIN",
    )
    logger.warning("[SECURITY] Admin account created for username=%s.", settings.admin_user)
    return True


def authenticate_user(db: Session, login: str, password: str) -> User | None:
    """Return the active user matching email or username and password."""
    identifier = login.strip()
    user = db.scalar(select(User).where(or_(User.email == identifier, User.username == identifier)).limit(1))
    if user is None or not verify_password(password, user.password_hash):
        return None
    if not user.is_active:
        logger.info("[AUTH] Login rejected for inactive user_id=%s", user.id)
        return None
    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    return user
