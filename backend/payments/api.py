import logging
from urllib.parse import urlencode

from django.conf import settings
from django.db import DatabaseError
from django.http import HttpResponseRedirect
from rest_framework import permissions
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.models import Booking
from core.exceptions import NotFoundError
from payments.models import Payment
from payments.services import settlement

logger = logging.getLogger(__name__)


def _redirect(base_url: str, params: dict) -> HttpResponseRedirect:
    separator = "&" if "?" in base_url else "?"
    return HttpResponseRedirect(f"{base_url}{separator}{urlencode(params)}")


def _ensure_owner_or_staff(user, owner_id: int) -> None:
    # Hide other users' records behind a 404 rather than a 403.
    if not user.is_staff and user.pk != owner_id:
        raise NotFoundError("Payment not found.")


class InitPaymentView(APIView):
    """Issue a fresh gateway redirect for an unpaid booking."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, booking_id, *args, **kwargs):
        booking = Booking.objects.filter(pk=booking_id).only("id", "user_id").first()
        if booking is None:
            raise NotFoundError("Booking not found.")
        _ensure_owner_or_staff(request.user, booking.user_id)
        data = settlement.init_payment(booking.pk)
        return Response({"success": True, "message": "Payment initiated", **data})


class GatewayCallbackView(APIView):
    """
    Receive the payer's browser back from the hosted payment page.

    The gateway sends the payer here with ``transactionId``, ``amount`` and
    ``status`` in the query string (and may POST its own form fields). Every
    outcome ends in a redirect to the frontend; errors land on the fail page.
    """

    permission_classes: list = []
    authentication_classes: list = []
    handler = None
    frontend_setting = ""

    def _params(self, request):
        params = request.query_params.copy()
        if hasattr(request.data, "lists"):
            for key, values in request.data.lists():
                if key not in params:
                    params.setlist(key, values)
        return params

    def _fail_redirect(self, params, message):
        return _redirect(
            settings.SSLCOMMERZ_FAIL_FRONTEND_URL,
            {
                "transactionId": params.get("transactionId", ""),
                "message": message,
                "amount": params.get("amount", ""),
                "status": params.get("status", ""),
            },
        )

    def _settle(self, request):
        params = self._params(request)
        try:
            result = self.handler(params)
        except APIException as exc:
            logger.warning(
                "Payment callback %s failed for %s: %s",
                self.frontend_setting,
                params.get("transactionId", ""),
                exc.detail,
            )
            return self._fail_redirect(params, str(exc.detail))
        except DatabaseError:
            logger.exception(
                "Payment callback %s hit a database error for %s",
                self.frontend_setting,
                params.get("transactionId", ""),
            )
            return self._fail_redirect(params, "Payment could not be processed, please try again.")
        return _redirect(getattr(settings, self.frontend_setting), result.as_query())

    def get(self, request, *args, **kwargs):
        return self._settle(request)

    def post(self, request, *args, **kwargs):
        return self._settle(request)


class PaymentSuccessView(GatewayCallbackView):
    handler = staticmethod(settlement.handle_success)
    frontend_setting = "SSLCOMMERZ_SUCCESS_FRONTEND_URL"


class PaymentFailView(GatewayCallbackView):
    handler = staticmethod(settlement.handle_fail)
    frontend_setting = "SSLCOMMERZ_FAIL_FRONTEND_URL"


class PaymentCancelView(GatewayCallbackView):
    handler = staticmethod(settlement.handle_cancel)
    frontend_setting = "SSLCOMMERZ_CANCEL_FRONTEND_URL"


class InvoiceView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, payment_id, *args, **kwargs):
        payment = (
            Payment.objects.select_related("booking")
            .filter(pk=payment_id)
            .first()
        )
        if payment is None:
            raise NotFoundError("Payment not found.")
        _ensure_owner_or_staff(request.user, payment.booking.user_id)
        invoice_url = settlement.get_invoice_url(payment.pk)
        return Response({"success": True, "invoice_url": request.build_absolute_uri(invoice_url)})
