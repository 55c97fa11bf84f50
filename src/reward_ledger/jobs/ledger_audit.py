"""Background scheduler for the daily ledger audit."""

from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI

from ..core.config import get_settings
from ..core.database import SessionLocal
from ..services.points_service import audit_balances

logger = logging.getLogger(__name__)

_scheduler = AsyncIOScheduler(timezone="UTC")


async def _execute_ledger_audit() -> None:
    session = SessionLocal()
    try:
        summary = audit_balances(session)
        logger.info("ledger audit completed: %s", summary)
    except Exception:  # pragma: no cover - safeguard for background job
        logger.exception("ledger audit job failed")
        raise
    finally:
        session.close()


def register_scheduler(app: FastAPI) -> None:
    """Attach APScheduler lifecycle hooks to the FastAPI app."""

    settings = get_settings()
    if not settings.ledger_audit_enabled:
        logger.info("ledger audit scheduler disabled")
        return

    if _scheduler.get_job("ledger_audit") is None:
        _scheduler.add_job(
            _execute_ledger_audit,
            "cron",
            hour=settings.ledger_audit_hour,
            minute=0,
            id="ledger_audit",
            misfire_grace_time=3600,
        )

    @app.on_event("startup")
    async def start_scheduler() -> None:
        if not _scheduler.running:
            _scheduler.start()
            logger.info("ledger audit scheduler started")

    @app.on_event("shutdown")
    async def shutdown_scheduler() -> None:
        if _scheduler.running:
            _scheduler.shutdown(wait=False)
            logger.info("ledger audit scheduler stopped")


def run_audit_once() -> dict[str, object]:
    """Convenience helper to run the audit synchronously for manual checks."""

    session = SessionLocal()
    try:
        return audit_balances(session)
    finally:
        session.close()
