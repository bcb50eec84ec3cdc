from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests
from django.conf import settings

from core.exceptions import GatewayError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GatewayConfig:
    store_id: str
    store_password: str
    payment_api: str
    success_url: str
    fail_url: str
    cancel_url: str
    currency: str = "BDT"
    timeout: float = 15.0
    use_stub: bool = False
    preview_base_url: str = ""

    @classmethod
    def from_settings(cls) -> "GatewayConfig":
        return cls(
            store_id=settings.SSLCOMMERZ_STORE_ID,
            store_password=settings.SSLCOMMERZ_STORE_PASSWORD,
            payment_api=settings.SSLCOMMERZ_PAYMENT_API,
            success_url=settings.SSLCOMMERZ_SUCCESS_BACKEND_URL,
            fail_url=settings.SSLCOMMERZ_FAIL_BACKEND_URL,
            cancel_url=settings.SSLCOMMERZ_CANCEL_BACKEND_URL,
            currency=settings.SSLCOMMERZ_CURRENCY,
            timeout=settings.SSLCOMMERZ_TIMEOUT,
            use_stub=settings.SSLCOMMERZ_USE_STUB or not settings.SSLCOMMERZ_STORE_ID,
            preview_base_url=settings.FRONTEND_URL,
        )


@dataclass(frozen=True)
class BillingDetails:
    name: str
    email: str
    phone: str
    address: str


@dataclass
class GatewaySession:
    redirect_url: str
    raw_response: Dict[str, Any] = field(default_factory=dict)


def callback_url(base_url: str, *, transaction_id: str, amount: Decimal, status: str) -> str:
    separator = "&" if "?" in base_url else "?"
    query = urlencode({"transactionId": transaction_id, "amount": str(amount), "status": status})
    return f"{base_url}{separator}{query}"


class GatewayClient:
    """
    Translate a charge into the hosted payment page provider's request shape.

    The client knows nothing about bookings: it takes billing details, an amount
    and a transaction id, and returns the URL the payer should be redirected to.
    """

    def __init__(self, config: Optional[GatewayConfig] = None, *, session: Optional[requests.Session] = None):
        self.config = config or GatewayConfig.from_settings()
        self.http = session or requests.Session()

    def build_payload(self, billing: BillingDetails, amount: Decimal, transaction_id: str) -> Dict[str, Any]:
        config = self.config
        return {
            "store_id": config.store_id,
            "store_passwd": config.store_password,
            "total_amount": str(amount),
            "currency": config.currency,
            "tran_id": transaction_id,
            "success_url": callback_url(
                config.success_url, transaction_id=transaction_id, amount=amount, status="success"
            ),
            "fail_url": callback_url(
                config.fail_url, transaction_id=transaction_id, amount=amount, status="fail"
            ),
            "cancel_url": callback_url(
                config.cancel_url, transaction_id=transaction_id, amount=amount, status="cancel"
            ),
            "shipping_method": "N/A",
            "product_name": "Tour",
            "product_category": "Service",
            "product_profile": "general",
            "cus_name": billing.name,
            "cus_email": billing.email,
            "cus_add1": billing.address,
            "cus_add2": "N/A",
            "cus_city": "Dhaka",
            "cus_state": "Dhaka",
            "cus_postcode": "1000",
            "cus_country": "Bangladesh",
            "cus_phone": billing.phone,
            "cus_fax": "N/A",
            "ship_name": "N/A",
            "ship_add1": "N/A",
            "ship_add2": "N/A",
            "ship_city": "N/A",
            "ship_state": "N/A",
            "ship_postcode": "1000",
            "ship_country": "N/A",
        }

    def initiate(self, billing: BillingDetails, amount: Decimal, transaction_id: str) -> GatewaySession:
        if self.config.use_stub:
            return self._stub_session(amount=amount, transaction_id=transaction_id)

        payload = self.build_payload(billing, amount, transaction_id)
        try:
            response = self.http.post(
                self.config.payment_api,
                data=payload,
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as exc:
            logger.warning("Payment gateway request failed for %s: %s", transaction_id, exc)
            raise GatewayError(f"Payment gateway request failed: {exc}") from exc
        except ValueError as exc:
            logger.warning("Payment gateway returned a non-JSON body for %s", transaction_id)
            raise GatewayError("Payment gateway returned an unreadable response.") from exc

        if not isinstance(body, dict):
            raise GatewayError("Payment gateway returned an unreadable response.")

        redirect_url = body.get("GatewayPageURL")
        if str(body.get("status", "")).upper() != "SUCCESS" or not redirect_url:
            reason = body.get("failedreason") or "no payment page was issued"
            logger.warning("Payment gateway rejected %s: %s", transaction_id, reason)
            raise GatewayError(f"Payment gateway rejected the request: {reason}")

        return GatewaySession(redirect_url=redirect_url, raw_response=body)

    def _stub_session(self, *, amount: Decimal, transaction_id: str) -> GatewaySession:
        base = self.config.preview_base_url.rstrip("/")
        query = urlencode({"transactionId": transaction_id, "amount": str(amount)})
        preview_url = f"{base}/payments/preview?{query}"
        return GatewaySession(
            redirect_url=preview_url,
            raw_response={"status": "SUCCESS", "GatewayPageURL": preview_url, "stub": True},
        )


def get_gateway_client() -> GatewayClient:
    return GatewayClient(GatewayConfig.from_settings())
