import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class BookingValidationError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid booking request."
    default_code = "validation_error"


class NotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class ConflictError(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Request conflicts with the current state."
    default_code = "conflict"


class GatewayError(APIException):
    """The payment gateway was unreachable or rejected the request."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Payment gateway is unavailable."
    default_code = "gateway_error"


class DeliveryError(APIException):
    """Invoice rendering, storage or email delivery failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Invoice delivery failed."
    default_code = "delivery_error"


def api_exception_handler(exc, context):
    """Wrap DRF's handler so every error body carries ``success: false``."""
    response = exception_handler(exc, context)
    if response is None:
        return None

    if response.status_code >= 500:
        view = context.get("view")
        logger.error(
            "Request failed in %s: %s",
            view.__class__.__name__ if view else "unknown view",
            exc,
        )

    data = response.data
    if isinstance(data, dict):
        response.data = {"success": False, **data}
    else:
        response.data = {"success": False, "detail": data}
    return response
