from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from bookings.models import Booking
from bookings.services.pricing import compute_amount, new_transaction_id, validate_guest_count
from core.exceptions import BookingValidationError, ConflictError, NotFoundError
from payments.gateway import BillingDetails, get_gateway_client
from payments.models import Payment
from tours.models import Tour

logger = logging.getLogger(__name__)

User = get_user_model()

PROFILE_INCOMPLETE = "Please update your profile with phone and address."


@dataclass
class BookingResult:
    booking: Booking
    payment_url: str


def billing_details_for(user) -> BillingDetails:
    return BillingDetails(
        name=user.display_name,
        email=user.email,
        phone=user.phone,
        address=user.address,
    )


def _load_booking(booking_id: int) -> Booking:
    return (
        Booking.objects.select_related("user", "tour", "payment")
        .get(pk=booking_id)
    )


def create_booking(payload: Mapping[str, Any], user_id: int) -> BookingResult:
    """
    Reserve a tour for ``user_id`` and open a payment with the gateway.

    The Booking, its Payment and the gateway hand-off form one unit: if any step
    fails, including the gateway call, the transaction rolls back and neither
    record persists. Errors propagate unchanged to the caller.
    """
    guest_count = validate_guest_count(payload.get("guest_count"))
    tour_id = payload.get("tour")

    try:
        with transaction.atomic():
            # Serializes concurrent bookings by the same user so the duplicate check holds.
            try:
                user = User.objects.select_for_update().get(pk=user_id)
            except User.DoesNotExist:
                raise NotFoundError("User not found.")
            if not user.has_billing_profile:
                raise BookingValidationError(PROFILE_INCOMPLETE)

            try:
                tour = Tour.objects.filter(pk=tour_id).first()
            except (TypeError, ValueError):
                tour = None
            if tour is None or tour.cost_from is None:
                raise NotFoundError("Tour not found.")

            duplicate = Booking.objects.filter(
                user=user,
                tour=tour,
                status=Booking.PENDING,
                payment__status=Payment.UNPAID,
            ).exists()
            if duplicate:
                raise ConflictError("You already have an unpaid booking for this tour.")

            amount = compute_amount(tour.cost_from, guest_count)
            transaction_id = new_transaction_id()

            booking = Booking.objects.create(
                user=user,
                tour=tour,
                guest_count=guest_count,
                status=Booking.PENDING,
            )
            payment = Payment.objects.create(
                booking=booking,
                transaction_id=transaction_id,
                amount=amount,
                status=Payment.UNPAID,
            )
            booking.payment = payment
            booking.save(update_fields=["payment", "updated_at"])

            booking = _load_booking(booking.pk)

            session = get_gateway_client().initiate(
                billing_details_for(booking.user),
                amount,
                transaction_id,
            )
            payment = booking.payment
            payment.gateway_data = {"init": session.raw_response}
            payment.save(update_fields=["gateway_data", "updated_at"])
    except IntegrityError as exc:
        raise ConflictError("Booking could not be created, please retry.") from exc

    logger.info(
        "Booking %s created for user %s (tour=%s, guests=%s, amount=%s, transaction=%s)",
        booking.pk,
        user_id,
        tour.pk,
        guest_count,
        amount,
        transaction_id,
    )
    return BookingResult(booking=booking, payment_url=session.redirect_url)
