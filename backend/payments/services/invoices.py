from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from fpdf import FPDF

from core.exceptions import DeliveryError
from payments.services.emails import send_invoice_email

logger = logging.getLogger(__name__)

INVOICE_DIR = "invoices"


@dataclass(frozen=True)
class InvoiceData:
    transaction_id: str
    booking_date: datetime
    customer_name: str
    customer_email: str
    tour_title: str
    guest_count: int
    total_amount: Decimal


def _latin1(text) -> str:
    # Core PDF fonts only cover latin-1.
    return str(text).encode("latin-1", "replace").decode("latin-1")


def render_invoice_pdf(invoice: InvoiceData) -> bytes:
    pdf = FPDF(format="A4")
    pdf.set_margins(20, 20, 20)
    pdf.add_page()

    pdf.set_font("Helvetica", style="B", size=20)
    pdf.cell(0, 12, "Invoice", align="C", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(6)

    pdf.set_font("Helvetica", size=12)
    for line in (
        f"Transaction Number: {invoice.transaction_id}",
        f"Booking Date: {invoice.booking_date:%Y-%m-%d}",
        f"Customer Name: {invoice.customer_name}",
        f"Customer Email: {invoice.customer_email}",
    ):
        pdf.cell(0, 8, _latin1(line), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    for line in (
        f"Tour Title: {invoice.tour_title}",
        f"Guest Count: {invoice.guest_count}",
        f"Total Amount: {invoice.total_amount:.2f}",
    ):
        pdf.cell(0, 8, _latin1(line), new_x="LMARGIN", new_y="NEXT")

    pdf.ln(10)
    pdf.set_font("Helvetica", size=10)
    pdf.cell(0, 6, "Thank you for booking with us.", align="C", new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 6, "If you have any questions, please contact us.", align="C", new_x="LMARGIN", new_y="NEXT")

    return bytes(pdf.output())


def store_invoice(transaction_id: str, pdf: bytes) -> str:
    name = f"{INVOICE_DIR}/{transaction_id}.pdf"
    if default_storage.exists(name):
        default_storage.delete(name)
    saved_name = default_storage.save(name, ContentFile(pdf))
    return default_storage.url(saved_name)


def render_and_send(invoice: InvoiceData, to_email: str) -> str:
    """
    Render the invoice PDF, store it and email it to the customer.

    Returns the stored invoice URL. Any failure along the way is reported as a
    DeliveryError; callers treat it as non-fatal.
    """
    try:
        pdf = render_invoice_pdf(invoice)
        invoice_url = store_invoice(invoice.transaction_id, pdf)
        send_invoice_email(invoice=invoice, pdf=pdf, recipient=to_email, invoice_url=invoice_url)
    except DeliveryError:
        raise
    except Exception as exc:
        raise DeliveryError(f"Could not deliver invoice {invoice.transaction_id}: {exc}") from exc
    logger.info("Invoice %s sent to %s", invoice.transaction_id, to_email)
    return invoice_url
