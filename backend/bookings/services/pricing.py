from __future__ import annotations

import secrets
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from core.exceptions import BookingValidationError

CENTS = Decimal("0.01")
TRANSACTION_ID_PREFIX = "tran_"


def to_money(value) -> Decimal:
    """
    Coerce a price to a two-place Decimal, rounding half up.

    Floats go through ``str`` first so binary representation noise never leaks
    into a charge amount.
    """
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise BookingValidationError("Price must be a number.")
    if not amount.is_finite():
        raise BookingValidationError("Price must be a number.")
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def validate_guest_count(guest_count) -> int:
    if isinstance(guest_count, bool) or not isinstance(guest_count, int):
        raise BookingValidationError("Guest count must be a positive integer.")
    if guest_count <= 0:
        raise BookingValidationError("Guest count must be a positive integer.")
    return guest_count


def compute_amount(unit_price, guest_count) -> Decimal:
    validate_guest_count(guest_count)
    if unit_price is None:
        raise BookingValidationError("Tour price is not set.")
    price = to_money(unit_price)
    if price <= 0:
        raise BookingValidationError("Tour price must be greater than zero.")
    return (price * guest_count).quantize(CENTS, rounding=ROUND_HALF_UP)


def new_transaction_id() -> str:
    return f"{TRANSACTION_ID_PREFIX}{secrets.token_hex(12)}"
