"""Stripe adapter against real stripe objects and signed payloads."""

import hashlib
import hmac
import time
from decimal import Decimal

import pytest
import stripe

from minedine.api.deps import get_payment_gateway
from minedine.gateways.stripe_gateway import StripeGateway
from minedine.main import app
from minedine.models import Booking
from tests.conftest import auth_headers, build_event

WEBHOOK_SECRET = "whsec_test_minedine"
SECRET_KEY = "sk_test_minedine"


def sign(payload: str, secret: str = WEBHOOK_SECRET) -> str:
    timestamp = int(time.time())
    signature = hmac.new(
        secret.encode("utf-8"),
        f"{timestamp}.{payload}".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"t={timestamp},v1={signature}"


def payment_intent(**values) -> stripe.PaymentIntent:
    return stripe.PaymentIntent.construct_from(
        {"object": "payment_intent", **values}, SECRET_KEY
    )


@pytest.fixture
def stripe_gateway() -> StripeGateway:
    return StripeGateway(secret_key=SECRET_KEY, webhook_secret=WEBHOOK_SECRET)


def test_verified_event_is_plain_dict(stripe_gateway):
    payload = build_event("payment_intent.succeeded", "7f1c0a52-3c1e-4b7e-9a53-0f7f0d1c2b3a")

    event = stripe_gateway.verify_webhook(payload.encode("utf-8"), sign(payload))

    assert isinstance(event, dict)
    assert event["type"] == "payment_intent.succeeded"
    intent = event["data"]["object"]
    assert isinstance(intent["metadata"], dict)
    assert intent["metadata"].get("booking_id") == "7f1c0a52-3c1e-4b7e-9a53-0f7f0d1c2b3a"


def test_wrong_secret_rejected(stripe_gateway):
    payload = build_event("payment_intent.succeeded", None)

    assert stripe_gateway.verify_webhook(payload.encode("utf-8"), sign(payload, "whsec_other")) is None


def test_garbage_signature_rejected(stripe_gateway):
    payload = build_event("payment_intent.succeeded", None)

    assert stripe_gateway.verify_webhook(payload.encode("utf-8"), "not-a-signature") is None


async def test_verify_payment_flattens_intent(stripe_gateway, monkeypatch):
    async def retrieve_async(intent_id, **params):
        return payment_intent(
            id=intent_id,
            status="succeeded",
            amount=300,
            currency="eur",
            metadata={"type": "review_tip", "booking_id": "b-1"},
        )

    monkeypatch.setattr(stripe.PaymentIntent, "retrieve_async", retrieve_async)

    result = await stripe_gateway.verify_payment("pi_tip")

    assert result.success is True
    assert result.transaction_id == "pi_tip"
    assert result.raw_response == {
        "status": "succeeded",
        "amount": 300,
        "currency": "eur",
        "metadata": {"type": "review_tip", "booking_id": "b-1"},
    }
    assert type(result.raw_response["metadata"]) is dict


async def test_verify_payment_not_succeeded(stripe_gateway, monkeypatch):
    async def retrieve_async(intent_id, **params):
        return payment_intent(id=intent_id, status="processing", amount=300, currency="eur")

    monkeypatch.setattr(stripe.PaymentIntent, "retrieve_async", retrieve_async)

    result = await stripe_gateway.verify_payment("pi_slow")

    assert result.success is False
    assert result.raw_response["status"] == "processing"
    assert result.raw_response["metadata"] == {}


async def test_create_payment_sends_string_metadata(stripe_gateway, monkeypatch):
    calls = []

    async def create_async(**params):
        calls.append(params)
        return payment_intent(
            id="pi_new", client_secret="pi_new_secret", status="requires_payment_method"
        )

    monkeypatch.setattr(stripe.PaymentIntent, "create_async", create_async)

    result = await stripe_gateway.create_payment(
        amount=5000,
        currency="EUR",
        reference_id="booking-1",
        description="Mine Dine booking: Sunday Roast",
        metadata={"booking_id": "booking-1", "tip_stars": 3},
    )

    assert result.success is True
    assert result.client_secret == "pi_new_secret"
    [params] = calls
    assert params["amount"] == 5000
    assert params["currency"] == "eur"
    assert params["metadata"] == {
        "reference_id": "booking-1",
        "booking_id": "booking-1",
        "tip_stars": "3",
    }


async def test_create_payment_processor_error(stripe_gateway, monkeypatch):
    async def create_async(**params):
        raise stripe.APIConnectionError("connection reset")

    monkeypatch.setattr(stripe.PaymentIntent, "create_async", create_async)

    result = await stripe_gateway.create_payment(
        amount=5000, currency="EUR", reference_id="booking-1", description="Sunday Roast"
    )

    assert result.success is False
    assert "connection reset" in result.error_message


@pytest.fixture
def stripe_client(client, stripe_gateway):
    app.dependency_overrides[get_payment_gateway] = lambda: stripe_gateway
    return client


async def test_signed_webhook_confirms_booking(stripe_client, factory, fetch):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    dinner = await factory.dinner(host)
    booking = await factory.booking(guest, dinner)
    payload = build_event("payment_intent.succeeded", booking.id, "pi_signed")

    response = await stripe_client.post(
        "/api/v1/payments/webhook",
        content=payload,
        headers={"Content-Type": "application/json", "Stripe-Signature": sign(payload)},
    )

    assert response.status_code == 200
    stored = await fetch(Booking, booking.id)
    assert stored.status == "CONFIRMED"
    assert stored.stripe_payment_intent_id == "pi_signed"


async def test_signed_failure_cancels_booking(stripe_client, factory, fetch):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    dinner = await factory.dinner(host)
    booking = await factory.booking(guest, dinner)
    payload = build_event("payment_intent.payment_failed", booking.id)

    response = await stripe_client.post(
        "/api/v1/payments/webhook",
        content=payload,
        headers={"Content-Type": "application/json", "Stripe-Signature": sign(payload)},
    )

    assert response.status_code == 200
    assert (await fetch(Booking, booking.id)).status == "CANCELLED"


async def test_tipped_review_verified_through_stripe(stripe_client, factory, monkeypatch):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    dinner = await factory.dinner(host)
    booking = await factory.booking(guest, dinner, status="COMPLETED", total_price=Decimal("100.00"))

    async def retrieve_async(intent_id, **params):
        return payment_intent(
            id=intent_id,
            status="succeeded",
            amount=300,
            currency="eur",
            metadata={"type": "review_tip", "booking_id": str(booking.id), "tip_stars": "3"},
        )

    monkeypatch.setattr(stripe.PaymentIntent, "retrieve_async", retrieve_async)

    response = await stripe_client.post(
        "/api/v1/reviews/",
        json={
            "booking_id": str(booking.id),
            "hospitality_stars": 5,
            "cleanliness_stars": 2,
            "taste_stars": 1,
            "tip_stars": 3,
            "tip_payment_intent_id": "pi_tip_paid",
        },
        headers=auth_headers(guest),
    )

    assert response.status_code == 201
    assert Decimal(response.json()["tip_amount"]) == Decimal("3.00")
