from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.core.mail import EmailMessage

if TYPE_CHECKING:
    from payments.services.invoices import InvoiceData


def _format_from_email(sender_name: str) -> str:
    default_from = settings.DEFAULT_FROM_EMAIL
    email_addr = default_from
    if '<' in default_from and default_from.endswith('>'):
        email_addr = default_from.split('<', 1)[1].rstrip('>')
    return f"{sender_name} <{email_addr}>"


def send_invoice_email(*, invoice: "InvoiceData", pdf: bytes, recipient: str, invoice_url: str = ""):
    subject = f"Your invoice for {invoice.tour_title}"
    from_email = _format_from_email("Tour Booking")

    body_lines = [
        f"Hi {invoice.customer_name or invoice.customer_email},",
        "",
        f"Thanks for booking {invoice.tour_title}. Your payment has been received.",
        "",
        f" • Transaction: {invoice.transaction_id}",
        f" • Booking date: {invoice.booking_date:%B %d, %Y}",
        f" • Guests: {invoice.guest_count}",
        f" • Total paid: {invoice.total_amount:.2f}",
    ]
    if invoice_url:
        body_lines.append(f" • Download your invoice: {invoice_url}")
    body_lines += [
        "",
        "Your invoice is attached to this email.",
        "",
        "— The Tour Booking Team",
    ]

    message = EmailMessage(
        subject,
        "\n".join(body_lines),
        from_email,
        [recipient],
    )
    message.attach(f"invoice-{invoice.transaction_id}.pdf", pdf, "application/pdf")
    message.send(fail_silently=False)
