"""Shared fixtures: in-memory database, fake payment gateway and API client."""

import json
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import minedine.models  # noqa: F401
from minedine.api.deps import get_payment_gateway
from minedine.core.security import create_access_token
from minedine.database import Base, get_db
from minedine.gateways.base import GatewayType, PaymentGateway, PaymentResult
from minedine.main import app
from minedine.models import Booking, Dinner, DinnerAddOn, HostApplication, User

VALID_SIGNATURE = "t=1,v1=valid"


class FakeGateway(PaymentGateway):
    """In-memory stand-in for Stripe."""

    def __init__(self) -> None:
        self.intents: dict[str, dict] = {}
        self.fail_create = False

    @property
    def gateway_type(self) -> GatewayType:
        return GatewayType.STRIPE

    async def create_payment(
        self,
        amount: int,
        currency: str,
        reference_id: str,
        description: str,
        metadata: dict | None = None,
    ) -> PaymentResult:
        if self.fail_create:
            return PaymentResult(success=False, error_message="card_declined")

        intent_id = f"pi_test_{len(self.intents) + 1}"
        self.intents[intent_id] = {
            "status": "requires_payment_method",
            "amount": amount,
            "currency": currency.lower(),
            "description": description,
            "metadata": {key: str(value) for key, value in (metadata or {}).items()},
        }
        return PaymentResult(
            success=True,
            transaction_id=intent_id,
            client_secret=f"{intent_id}_secret",
            raw_response={"id": intent_id, "status": "requires_payment_method"},
        )

    async def verify_payment(self, transaction_id: str) -> PaymentResult:
        intent = self.intents.get(transaction_id)
        if intent is None:
            return PaymentResult(success=False, error_message="No such payment_intent")
        return PaymentResult(
            success=intent["status"] == "succeeded",
            transaction_id=transaction_id,
            raw_response=dict(intent),
        )

    def verify_webhook(self, payload: bytes, signature: str) -> dict | None:
        if signature != VALID_SIGNATURE:
            return None
        return json.loads(payload)

    def mark_succeeded(self, intent_id: str) -> None:
        self.intents[intent_id]["status"] = "succeeded"


def build_event(event_type: str, booking_id: UUID | str | None, intent_id: str = "pi_test_1") -> str:
    metadata = {"booking_id": str(booking_id)} if booking_id else {}
    return json.dumps(
        {
            "id": "evt_test",
            "object": "event",
            "type": event_type,
            "data": {"object": {"id": intent_id, "object": "payment_intent", "metadata": metadata}},
        }
    )


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
async def client(session_maker, gateway) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def fetch(session_maker):
    """Load a fresh copy of a row in its own session."""

    async def _fetch(model, ident):
        async with session_maker() as session:
            return await session.get(model, ident)

    return _fetch


class Factory:
    """Creates committed rows for tests."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self.session_maker = session_maker
        self._counter = 0

    async def _save(self, obj):
        async with self.session_maker() as session:
            session.add(obj)
            await session.commit()
            await session.refresh(obj)
        return obj

    async def user(
        self,
        role: str = "GUEST",
        referral_code: str | None = None,
        is_active: bool = True,
    ) -> User:
        self._counter += 1
        return await self._save(
            User(
                email=f"user{self._counter}@example.com",
                name=f"User {self._counter}",
                role=role,
                is_active=is_active,
                referral_code=referral_code,
            )
        )

    async def dinner(
        self,
        host: User,
        max_guests: int = 10,
        price: Decimal = Decimal("25.00"),
        status: str = "PUBLISHED",
        date_time: datetime | None = None,
    ) -> Dinner:
        return await self._save(
            Dinner(
                host_id=host.id,
                title="Sunday Roast",
                max_guests=max_guests,
                base_price_per_person=price,
                status=status,
                moderation_status="APPROVED",
                date_time=date_time or datetime.now(UTC) + timedelta(days=7),
            )
        )

    async def add_on(self, dinner: Dinner, name: str = "Wine pairing", price: Decimal = Decimal("12.50")) -> DinnerAddOn:
        return await self._save(DinnerAddOn(dinner_id=dinner.id, name=name, price=price))

    async def booking(
        self,
        user: User,
        dinner: Dinner,
        number_of_guests: int = 2,
        status: str = "PENDING",
        total_price: Decimal = Decimal("100.00"),
        referral_moderator: User | None = None,
        created_at: datetime | None = None,
        selected_add_ons: list | None = None,
    ) -> Booking:
        booking = Booking(
            user_id=user.id,
            dinner_id=dinner.id,
            number_of_guests=number_of_guests,
            base_price=total_price,
            add_ons_total=Decimal("0.00"),
            total_price=total_price,
            selected_add_ons=selected_add_ons or [],
            referral_code_used=referral_moderator.referral_code if referral_moderator else None,
            referral_moderator_id=referral_moderator.id if referral_moderator else None,
            status=status,
            stripe_payment_intent_id="pi_test_1",
        )
        if created_at:
            booking.created_at = created_at
        return await self._save(booking)

    async def host_application(
        self,
        host: User,
        status: str = "APPROVED",
        onboarded_by: User | None = None,
    ) -> HostApplication:
        return await self._save(
            HostApplication(
                user_id=host.id,
                application_text="I cook for friends every weekend.",
                status=status,
                onboarded_by_id=onboarded_by.id if onboarded_by else None,
            )
        )


@pytest.fixture
def factory(session_maker) -> Factory:
    return Factory(session_maker)
