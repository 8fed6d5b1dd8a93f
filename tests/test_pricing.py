"""Booking price calculation."""

from decimal import Decimal
from uuid import uuid4

import pytest

from minedine.core.exceptions import ValidationError
from minedine.domain.pricing import (
    AddOnSelection,
    CatalogueItem,
    calculate_booking_price,
    to_minor_units,
    to_money,
)


def test_base_price_only():
    price = calculate_booking_price(Decimal("25.00"), 4)

    assert price.base_price == Decimal("100.00")
    assert price.add_ons_total == Decimal("0.00")
    assert price.total_price == Decimal("100.00")
    assert price.line_items == []


def test_add_ons_are_priced_by_quantity():
    wine, dessert = uuid4(), uuid4()
    catalogue = {
        wine: CatalogueItem(name="Wine pairing", price=Decimal("12.50")),
        dessert: CatalogueItem(name="Dessert", price=Decimal("6.00")),
    }

    price = calculate_booking_price(
        Decimal("30.00"),
        2,
        [AddOnSelection(wine, 2), AddOnSelection(dessert, 1)],
        catalogue,
    )

    assert price.base_price == Decimal("60.00")
    assert price.add_ons_total == Decimal("31.00")
    assert price.total_price == price.base_price + price.add_ons_total == Decimal("91.00")
    assert price.line_items[0] == {
        "add_on_id": str(wine),
        "name": "Wine pairing",
        "unit_price": "12.50",
        "quantity": 2,
    }


def test_unknown_add_on_rejects_request():
    catalogue = {uuid4(): CatalogueItem(name="Wine", price=Decimal("10.00"))}

    with pytest.raises(ValidationError) as exc_info:
        calculate_booking_price(Decimal("20.00"), 2, [AddOnSelection(uuid4(), 1)], catalogue)

    assert exc_info.value.status_code == 400
    assert "Unknown add-on" in exc_info.value.detail


def test_quantity_must_be_positive():
    wine = uuid4()
    catalogue = {wine: CatalogueItem(name="Wine", price=Decimal("10.00"))}

    with pytest.raises(ValidationError):
        calculate_booking_price(Decimal("20.00"), 2, [AddOnSelection(wine, 0)], catalogue)


def test_negative_guests_rejected():
    with pytest.raises(ValidationError):
        calculate_booking_price(Decimal("20.00"), -1)


def test_zero_guests_costs_nothing():
    assert calculate_booking_price(Decimal("20.00"), 0).total_price == Decimal("0.00")


def test_rounding_to_cents():
    assert to_money(Decimal("10.005")) == Decimal("10.01")
    assert calculate_booking_price(Decimal("33.333"), 3).base_price == Decimal("100.00")


def test_minor_units():
    assert to_minor_units(Decimal("100.00")) == 10000
    assert to_minor_units(Decimal("3.5")) == 350
