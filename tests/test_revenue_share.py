"""Revenue-share percentage curve."""

from decimal import Decimal

import pytest

from minedine.domain.revenue_share import calculate_share_amount, calculate_share_percentage


def test_first_booking_earns_base_percentage():
    assert calculate_share_percentage(1) == Decimal("5.0")


def test_percentage_decays_per_booking():
    assert calculate_share_percentage(2) == Decimal("4.9")
    assert calculate_share_percentage(11) == Decimal("4.0")


def test_percentage_never_negative():
    assert calculate_share_percentage(51) == Decimal("0.0")
    assert calculate_share_percentage(200) == Decimal("0")


def test_booking_number_starts_at_one():
    with pytest.raises(ValueError):
        calculate_share_percentage(0)


def test_share_amount():
    assert calculate_share_amount(Decimal("100.00"), Decimal("5.0")) == Decimal("5.00")
    assert calculate_share_amount(Decimal("87.45"), Decimal("4.9")) == Decimal("4.29")
