from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from django.db import DatabaseError, transaction

from bookings.models import Booking
from bookings.services.bookings import billing_details_for
from core.exceptions import BookingValidationError, ConflictError, DeliveryError, NotFoundError
from payments.gateway import get_gateway_client
from payments.models import Payment
from payments.services import invoices

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outcome:
    payment_status: str
    booking_status: str
    success: bool
    message: str


SUCCESS = Outcome(Payment.PAID, Booking.COMPLETED, True, "Payment Completed Successfully")
FAIL = Outcome(Payment.FAILED, Booking.FAILED, False, "Payment Failed")
CANCEL = Outcome(Payment.CANCELLED, Booking.CANCEL, False, "Payment Cancelled")


@dataclass
class SettlementResult:
    success: bool
    message: str
    transaction_id: str
    amount: str = ""
    status: str = ""

    def as_query(self) -> dict:
        return {
            "transactionId": self.transaction_id,
            "message": self.message,
            "amount": self.amount,
            "status": self.status,
        }


def _transaction_id_from(query: Mapping[str, Any]) -> str:
    transaction_id = str(query.get("transactionId") or query.get("tran_id") or "").strip()
    if not transaction_id:
        raise BookingValidationError("Missing transactionId.")
    return transaction_id


def _gateway_payload(query: Mapping[str, Any]) -> dict:
    if hasattr(query, "lists"):
        return {key: values[-1] if len(values) == 1 else values for key, values in query.lists()}
    return dict(query)


def build_invoice_data(booking: Booking, payment: Payment) -> invoices.InvoiceData:
    return invoices.InvoiceData(
        transaction_id=payment.transaction_id,
        booking_date=booking.created_at,
        customer_name=booking.user.display_name,
        customer_email=booking.user.email,
        tour_title=booking.tour.title,
        guest_count=booking.guest_count,
        total_amount=payment.amount,
    )


def dispatch_invoice(payment_id: int, invoice: invoices.InvoiceData) -> Optional[str]:
    """
    Render, store and email the invoice for a settled payment.

    Runs after the settlement transaction has committed; a delivery failure is
    logged and never touches the payment or booking status.
    """
    try:
        invoice_url = invoices.render_and_send(invoice, invoice.customer_email)
        Payment.objects.filter(pk=payment_id).update(invoice_url=invoice_url)
    except DeliveryError:
        logger.exception("Invoice delivery failed for transaction %s", invoice.transaction_id)
        return None
    except DatabaseError:
        logger.exception("Could not record invoice url for transaction %s", invoice.transaction_id)
        return None
    return invoice_url


def _settle(query: Mapping[str, Any], outcome: Outcome) -> SettlementResult:
    transaction_id = _transaction_id_from(query)
    echoed_amount = str(query.get("amount") or "")
    echoed_status = str(query.get("status") or "")

    with transaction.atomic():
        payment = (
            Payment.objects.select_for_update()
            .filter(transaction_id=transaction_id)
            .first()
        )
        if payment is None:
            raise NotFoundError("Payment not found for this transaction.")

        if payment.status == outcome.payment_status:
            logger.info(
                "Ignoring repeated %s callback for transaction %s",
                outcome.payment_status,
                transaction_id,
            )
            return SettlementResult(
                success=outcome.success,
                message=outcome.message,
                transaction_id=transaction_id,
                amount=echoed_amount or str(payment.amount),
                status=echoed_status,
            )
        if payment.is_terminal:
            logger.warning(
                "Rejected %s callback for transaction %s already %s",
                outcome.payment_status,
                transaction_id,
                payment.status,
            )
            raise ConflictError(f"Payment is already {payment.status.lower()}.")

        payment.status = outcome.payment_status
        payment.gateway_data = {**(payment.gateway_data or {}), "callback": _gateway_payload(query)}
        payment.save(update_fields=["status", "gateway_data", "updated_at"])

        updated = Booking.objects.filter(pk=payment.booking_id, status=Booking.PENDING).update(
            status=outcome.booking_status
        )
        if updated != 1:
            # The pair must move together; roll back the payment change.
            raise ConflictError("Booking is not awaiting payment.")

        if outcome is SUCCESS:
            booking = Booking.objects.select_related("user", "tour").get(pk=payment.booking_id)
            invoice = build_invoice_data(booking, payment)
            transaction.on_commit(lambda: dispatch_invoice(payment.pk, invoice))

    logger.info(
        "Transaction %s settled: payment=%s booking=%s",
        transaction_id,
        outcome.payment_status,
        outcome.booking_status,
    )
    return SettlementResult(
        success=outcome.success,
        message=outcome.message,
        transaction_id=transaction_id,
        amount=echoed_amount or str(payment.amount),
        status=echoed_status,
    )


def handle_success(query: Mapping[str, Any]) -> SettlementResult:
    return _settle(query, SUCCESS)


def handle_fail(query: Mapping[str, Any]) -> SettlementResult:
    return _settle(query, FAIL)


def handle_cancel(query: Mapping[str, Any]) -> SettlementResult:
    return _settle(query, CANCEL)


def init_payment(booking_id: int) -> dict:
    """Issue a fresh gateway redirect for a booking whose payment is still unpaid."""
    payment = (
        Payment.objects.select_related("booking__user")
        .filter(booking_id=booking_id)
        .first()
    )
    if payment is None:
        raise NotFoundError("Payment not found. You have not booked this tour yet.")
    if payment.status != Payment.UNPAID:
        raise ConflictError(f"Payment is already {payment.status.lower()}.")

    session = get_gateway_client().initiate(
        billing_details_for(payment.booking.user),
        payment.amount,
        payment.transaction_id,
    )
    return {"payment_url": session.redirect_url}


def get_invoice_url(payment_id: int) -> str:
    payment = Payment.objects.filter(pk=payment_id).only("invoice_url").first()
    if payment is None:
        raise NotFoundError("Payment not found.")
    if not payment.invoice_url:
        raise NotFoundError("No invoice has been generated for this payment yet.")
    return payment.invoice_url
