"""FastAPI entrypoint for the weekly workload capacity service."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from workload.api.v1.api import api_router
from workload.core.config import settings
from workload.db import session as db_session
from workload.db.base import Base
from workload.services.account_service import ensure_default_admin

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup() -> None:
    Base.metadata.create_all(bind=db_session.engine)
    with db_session.SessionLocal() as session:
        try:
            admin_present = ensure_default_admin(session)
            logger.info("[BOOTSTRAP] admin present: %s", "yes" if admin_present else "no")
        except Exception:
            logger.exception("[BOOTSTRAP] Admin bootstrap failed; continuing startup.")


@app.get("/")
def root() -> dict[str, str]:
    return {"service": settings.app_name, "status": "ok", "timezone": settings.business_timezone}
