"""Celery background tasks for the booking lifecycle."""

import asyncio
import logging

from celery import shared_task

from minedine.database import close_db, get_db_context
from minedine.services.booking_service import booking_service

logger = logging.getLogger(__name__)


def run_async(coro):
    """Run async function in sync context."""
    return asyncio.run(coro)


async def _with_engine_cleanup(coro):
    # Each task gets a fresh event loop; pooled connections must not outlive it
    try:
        return await coro
    finally:
        await close_db()


@shared_task(bind=True, max_retries=3)
def expire_pending_bookings(self):
    """Cancel PENDING bookings older than the payment window."""
    try:
        expired = run_async(_with_engine_cleanup(_expire_pending_bookings()))
        return {"status": "success", "expired": expired}
    except Exception as exc:
        logger.exception(f"expire_pending_bookings failed: {exc}")
        raise self.retry(exc=exc, countdown=60)


async def _expire_pending_bookings() -> int:
    async with get_db_context() as db:
        expired = await booking_service.expire_pending_bookings(db)
    if expired:
        logger.info(f"Expired {expired} unpaid booking(s)")
    return expired


@shared_task(bind=True, max_retries=3)
def complete_past_bookings(self):
    """Move CONFIRMED bookings of past dinners to COMPLETED."""
    try:
        completed = run_async(_with_engine_cleanup(_complete_past_bookings()))
        return {"status": "success", "completed": completed}
    except Exception as exc:
        logger.exception(f"complete_past_bookings failed: {exc}")
        raise self.retry(exc=exc, countdown=60)


async def _complete_past_bookings() -> int:
    async with get_db_context() as db:
        return await booking_service.complete_past_bookings(db)
