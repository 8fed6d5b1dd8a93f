"""Booking price calculation.

- base_price = base_price_per_person * number_of_guests
- add_ons_total = sum(add-on price * quantity)
- total_price = base_price + add_ons_total

All amounts are EUR Decimals rounded to cents. The result is computed once
when the booking is created and stored on the row.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any
from uuid import UUID

from minedine.core.exceptions import ValidationError

CENTS = Decimal("0.01")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Quantize a value to cents."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal) -> int:
    """EUR amount to integer cents for the payment processor."""
    return int((to_money(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class AddOnSelection:
    add_on_id: UUID
    quantity: int


@dataclass(frozen=True)
class CatalogueItem:
    name: str
    price: Decimal


@dataclass
class BookingPrice:
    """Calculated booking amounts."""

    base_price: Decimal
    add_ons_total: Decimal
    total_price: Decimal
    line_items: list[dict[str, Any]] = field(default_factory=list)


def calculate_booking_price(
    base_price_per_person: Decimal,
    number_of_guests: int,
    selections: Iterable[AddOnSelection] = (),
    catalogue: Mapping[UUID, CatalogueItem] | None = None,
) -> BookingPrice:
    """Calculate booking amounts.

    Args:
        base_price_per_person: Dinner price per guest
        number_of_guests: Guests in the booking
        selections: Requested add-ons with quantities
        catalogue: The dinner's add-ons keyed by id

    Returns:
        BookingPrice with a line-item snapshot of the selected add-ons

    Raises:
        ValidationError: Negative guest count, bad quantity or unknown add-on
    """
    if number_of_guests < 0:
        raise ValidationError("Number of guests cannot be negative")

    catalogue = catalogue or {}
    base_price = to_money(Decimal(base_price_per_person) * number_of_guests)

    add_ons_total = Decimal("0")
    line_items: list[dict[str, Any]] = []
    for selection in selections:
        if selection.quantity < 1:
            raise ValidationError("Add-on quantity must be at least 1")
        item = catalogue.get(selection.add_on_id)
        if item is None:
            raise ValidationError(f"Unknown add-on '{selection.add_on_id}' for this dinner")

        unit_price = to_money(item.price)
        add_ons_total += unit_price * selection.quantity
        line_items.append(
            {
                "add_on_id": str(selection.add_on_id),
                "name": item.name,
                "unit_price": str(unit_price),
                "quantity": selection.quantity,
            }
        )

    add_ons_total = to_money(add_ons_total)
    return BookingPrice(
        base_price=base_price,
        add_ons_total=add_ons_total,
        total_price=base_price + add_ons_total,
        line_items=line_items,
    )
