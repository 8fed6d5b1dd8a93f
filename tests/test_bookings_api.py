"""Booking creation and retrieval."""

from decimal import Decimal
from uuid import UUID, uuid4

from minedine.models import Booking
from tests.conftest import auth_headers

BOOKINGS_URL = "/api/v1/bookings/"


async def test_create_booking_pending_with_payment_intent(client, factory, gateway, fetch):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    dinner = await factory.dinner(host, max_guests=10, price=Decimal("25.00"))

    response = await client.post(
        BOOKINGS_URL,
        json={"dinner_id": str(dinner.id), "number_of_guests": 4},
        headers=auth_headers(guest),
    )

    assert response.status_code == 201
    data = response.json()
    booking = data["booking"]
    assert booking["status"] == "PENDING"
    assert Decimal(booking["base_price"]) == Decimal("100.00")
    assert Decimal(booking["total_price"]) == Decimal("100.00")
    assert data["payment_intent_id"] == "pi_test_1"
    assert data["client_secret"] == "pi_test_1_secret"

    intent = gateway.intents["pi_test_1"]
    assert intent["amount"] == 10000
    assert intent["currency"] == "eur"
    assert intent["metadata"] == {
        "booking_id": booking["id"],
        "user_id": str(guest.id),
        "dinner_id": str(dinner.id),
    }

    stored = await fetch(Booking, UUID(booking["id"]))
    assert stored.stripe_payment_intent_id == "pi_test_1"


async def test_create_booking_with_add_ons(client, factory):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    dinner = await factory.dinner(host, price=Decimal("30.00"))
    wine = await factory.add_on(dinner, price=Decimal("12.50"))

    response = await client.post(
        BOOKINGS_URL,
        json={
            "dinner_id": str(dinner.id),
            "number_of_guests": 2,
            "selected_add_ons": [{"add_on_id": str(wine.id), "quantity": 2}],
        },
        headers=auth_headers(guest),
    )

    assert response.status_code == 201
    booking = response.json()["booking"]
    assert Decimal(booking["base_price"]) == Decimal("60.00")
    assert Decimal(booking["add_ons_total"]) == Decimal("25.00")
    assert Decimal(booking["total_price"]) == Decimal("85.00")
    assert booking["selected_add_ons"][0]["name"] == "Wine pairing"
    assert booking["selected_add_ons"][0]["quantity"] == 2


async def test_unknown_add_on_rejected(client, factory, gateway):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    dinner = await factory.dinner(host)

    response = await client.post(
        BOOKINGS_URL,
        json={
            "dinner_id": str(dinner.id),
            "number_of_guests": 2,
            "selected_add_ons": [{"add_on_id": str(uuid4()), "quantity": 1}],
        },
        headers=auth_headers(guest),
    )

    assert response.status_code == 400
    assert "Unknown add-on" in response.json()["error"]
    assert gateway.intents == {}


async def test_capacity_exceeded(client, factory, gateway):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    other = await factory.user()
    dinner = await factory.dinner(host, max_guests=10)
    await factory.booking(other, dinner, number_of_guests=8, status="CONFIRMED")

    response = await client.post(
        BOOKINGS_URL,
        json={"dinner_id": str(dinner.id), "number_of_guests": 5},
        headers=auth_headers(guest),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Not enough spots available (2 left)"}
    assert gateway.intents == {}


async def test_pending_bookings_hold_seats_cancelled_do_not(client, factory):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    other = await factory.user()
    dinner = await factory.dinner(host, max_guests=6)
    await factory.booking(other, dinner, number_of_guests=3, status="PENDING")
    await factory.booking(other, dinner, number_of_guests=5, status="CANCELLED")

    response = await client.post(
        BOOKINGS_URL,
        json={"dinner_id": str(dinner.id), "number_of_guests": 3},
        headers=auth_headers(guest),
    )

    assert response.status_code == 201


async def test_unpublished_dinner_not_bookable(client, factory):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    dinner = await factory.dinner(host, status="DRAFT")

    response = await client.post(
        BOOKINGS_URL,
        json={"dinner_id": str(dinner.id), "number_of_guests": 1},
        headers=auth_headers(guest),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Dinner is not available for booking"}


async def test_unknown_dinner(client, factory):
    guest = await factory.user()

    response = await client.post(
        BOOKINGS_URL,
        json={"dinner_id": str(uuid4()), "number_of_guests": 1},
        headers=auth_headers(guest),
    )

    assert response.status_code == 404


async def test_host_cannot_book_own_dinner(client, factory):
    host = await factory.user(role="HOST")
    dinner = await factory.dinner(host)

    response = await client.post(
        BOOKINGS_URL,
        json={"dinner_id": str(dinner.id), "number_of_guests": 1},
        headers=auth_headers(host),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "You cannot book your own dinner"}


async def test_valid_referral_code_is_attributed(client, factory, fetch):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    moderator = await factory.user(role="MODERATOR", referral_code="MOD-AB12")
    dinner = await factory.dinner(host)

    response = await client.post(
        BOOKINGS_URL,
        json={"dinner_id": str(dinner.id), "number_of_guests": 2, "referral_code": "MOD-AB12"},
        headers=auth_headers(guest),
    )

    assert response.status_code == 201
    booking = await fetch(Booking, UUID(response.json()["booking"]["id"]))
    assert booking.referral_code_used == "MOD-AB12"
    assert booking.referral_moderator_id == moderator.id


async def test_invalid_referral_code_rejected_before_payment(client, factory, gateway, session_maker):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    await factory.user(role="MODERATOR", referral_code="MOD-AB12")
    await factory.user(role="MODERATOR", referral_code="MOD-GONE", is_active=False)
    dinner = await factory.dinner(host)

    for code in ("MOD-XXXX", "mod-ab12", "MOD-GONE"):
        response = await client.post(
            BOOKINGS_URL,
            json={"dinner_id": str(dinner.id), "number_of_guests": 2, "referral_code": code},
            headers=auth_headers(guest),
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid referral code"}

    assert gateway.intents == {}
    response = await client.get(BOOKINGS_URL, headers=auth_headers(guest))
    assert response.json()["total"] == 0


async def test_payment_failure_leaves_booking_pending(client, factory, gateway):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    dinner = await factory.dinner(host)
    gateway.fail_create = True

    response = await client.post(
        BOOKINGS_URL,
        json={"dinner_id": str(dinner.id), "number_of_guests": 2},
        headers=auth_headers(guest),
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create payment intent"}

    listing = await client.get(BOOKINGS_URL, headers=auth_headers(guest))
    bookings = listing.json()["bookings"]
    assert len(bookings) == 1
    assert bookings[0]["status"] == "PENDING"
    assert bookings[0]["stripe_payment_intent_id"] is None


async def test_invalid_request_body(client, factory):
    guest = await factory.user()

    response = await client.post(
        BOOKINGS_URL,
        json={"number_of_guests": 0},
        headers=auth_headers(guest),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request data"


async def test_requires_authentication(client):
    response = await client.post(BOOKINGS_URL, json={})

    assert response.status_code == 401


async def test_get_booking_owner_only(client, factory):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    stranger = await factory.user()
    moderator = await factory.user(role="MODERATOR")
    dinner = await factory.dinner(host)
    booking = await factory.booking(guest, dinner)

    url = f"{BOOKINGS_URL}{booking.id}"
    assert (await client.get(url, headers=auth_headers(guest))).status_code == 200
    assert (await client.get(url, headers=auth_headers(moderator))).status_code == 200
    assert (await client.get(url, headers=auth_headers(stranger))).status_code == 403
    assert (await client.get(f"{BOOKINGS_URL}{uuid4()}", headers=auth_headers(guest))).status_code == 404


async def test_list_bookings_filtered_by_status(client, factory):
    host = await factory.user(role="HOST")
    guest = await factory.user()
    dinner = await factory.dinner(host)
    await factory.booking(guest, dinner, status="CONFIRMED")
    await factory.booking(guest, dinner, status="CANCELLED")

    response = await client.get(
        BOOKINGS_URL, params={"status": "CONFIRMED"}, headers=auth_headers(guest)
    )

    assert response.status_code == 200
    assert [b["status"] for b in response.json()["bookings"]] == ["CONFIRMED"]
