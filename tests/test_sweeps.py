"""Periodic booking sweeps and the Celery tasks that run them."""

from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta

import pytest

from minedine import tasks
from minedine.models import Booking
from minedine.services.booking_service import booking_service


async def test_expire_only_stale_pending_bookings(db, factory, fetch):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    dinner = await factory.dinner(host)
    stale = await factory.booking(guest, dinner, created_at=datetime.now(UTC) - timedelta(hours=2))
    fresh = await factory.booking(guest, dinner)
    paid = await factory.booking(
        guest, dinner, status="CONFIRMED", created_at=datetime.now(UTC) - timedelta(hours=2)
    )

    expired = await booking_service.expire_pending_bookings(db)
    await db.commit()

    assert expired == 1
    assert (await fetch(Booking, stale.id)).status == "CANCELLED"
    assert (await fetch(Booking, stale.id)).cancelled_at is not None
    assert (await fetch(Booking, fresh.id)).status == "PENDING"
    assert (await fetch(Booking, paid.id)).status == "CONFIRMED"


async def test_complete_bookings_of_past_dinners(db, factory, fetch):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    past = await factory.dinner(host, date_time=datetime.now(UTC) - timedelta(days=1))
    upcoming = await factory.dinner(host)
    done = await factory.booking(guest, past, status="CONFIRMED")
    unpaid = await factory.booking(guest, past, status="PENDING")
    later = await factory.booking(guest, upcoming, status="CONFIRMED")

    completed = await booking_service.complete_past_bookings(db)
    await db.commit()

    assert completed == 1
    assert (await fetch(Booking, done.id)).status == "COMPLETED"
    assert (await fetch(Booking, unpaid.id)).status == "PENDING"
    assert (await fetch(Booking, later.id)).status == "CONFIRMED"


@pytest.fixture
def task_session(monkeypatch, session_maker):
    """Point the task bodies at the test database."""

    @asynccontextmanager
    async def _context():
        async with session_maker() as session:
            yield session
            await session.commit()

    monkeypatch.setattr(tasks, "get_db_context", _context)


async def test_expire_task_body(task_session, factory, fetch):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    dinner = await factory.dinner(host)
    stale = await factory.booking(guest, dinner, created_at=datetime.now(UTC) - timedelta(hours=3))

    assert await tasks._expire_pending_bookings() == 1
    assert (await fetch(Booking, stale.id)).status == "CANCELLED"


async def test_complete_task_body(task_session, factory, fetch):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    dinner = await factory.dinner(host, date_time=datetime.now(UTC) - timedelta(hours=5))
    booking = await factory.booking(guest, dinner, status="CONFIRMED")

    assert await tasks._complete_past_bookings() == 1
    assert (await fetch(Booking, booking.id)).status == "COMPLETED"


async def test_engine_cleanup_runs_after_failure(monkeypatch):
    closed = []

    async def fake_close_db():
        closed.append(True)

    async def failing():
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(tasks, "close_db", fake_close_db)

    with pytest.raises(RuntimeError):
        await tasks._with_engine_cleanup(failing())
    assert closed == [True]
