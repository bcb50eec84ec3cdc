from decimal import Decimal

import pytest

from bookings.services.pricing import (
    TRANSACTION_ID_PREFIX,
    compute_amount,
    new_transaction_id,
    to_money,
    validate_guest_count,
)
from core.exceptions import BookingValidationError


def test_compute_amount_multiplies_price_by_guests():
    assert compute_amount(100, 3) == Decimal("300.00")
    assert compute_amount(Decimal("50"), 2) == Decimal("100.00")


@pytest.mark.parametrize(
    "price, guests, expected",
    [
        ("10.005", 1, Decimal("10.01")),
        (0.1, 3, Decimal("0.30")),
        ("33.333", 3, Decimal("99.99")),
        ("19.995", 2, Decimal("40.00")),
    ],
)
def test_compute_amount_rounds_half_up_to_cents(price, guests, expected):
    assert compute_amount(price, guests) == expected


def test_to_money_keeps_float_noise_out():
    assert to_money(0.1 + 0.2) == Decimal("0.30")
    assert to_money(2.675) == Decimal("2.68")


@pytest.mark.parametrize("value", ["abc", None, "NaN", "Infinity"])
def test_to_money_rejects_non_numbers(value):
    with pytest.raises(BookingValidationError):
        to_money(value)


@pytest.mark.parametrize("guests", [0, -1, 1.5, "2", True, None])
def test_validate_guest_count_rejects_non_positive_integers(guests):
    with pytest.raises(BookingValidationError):
        validate_guest_count(guests)


def test_compute_amount_requires_a_positive_price():
    with pytest.raises(BookingValidationError):
        compute_amount(None, 1)
    with pytest.raises(BookingValidationError):
        compute_amount(0, 1)
    with pytest.raises(BookingValidationError):
        compute_amount("-5", 2)


def test_new_transaction_id_is_prefixed_and_unique():
    first = new_transaction_id()
    second = new_transaction_id()

    assert first.startswith(TRANSACTION_ID_PREFIX)
    assert len(first) == len(TRANSACTION_ID_PREFIX) + 24
    assert first != second
