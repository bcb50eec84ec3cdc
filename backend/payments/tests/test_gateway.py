import types
from decimal import Decimal
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from core.exceptions import GatewayError
from payments.gateway import BillingDetails, GatewayClient, GatewayConfig, callback_url


@pytest.fixture
def config():
    return GatewayConfig(
        store_id="teststore",
        store_password="secret",
        payment_api="https://sandbox.gateway.test/gwprocess/v4/api.php",
        success_url="https://api.test/api/payments/success/",
        fail_url="https://api.test/api/payments/fail/",
        cancel_url="https://api.test/api/payments/cancel/",
        timeout=5.0,
    )


@pytest.fixture
def billing():
    return BillingDetails(
        name="Tara Traveller",
        email="traveller@example.com",
        phone="01700000000",
        address="House 1, Road 2, Dhaka",
    )


class FakeSession:
    def __init__(self, body=None, error=None, status_error=None):
        self.body = body
        self.error = error
        self.status_error = status_error
        self.calls = []

    def post(self, url, data=None, timeout=None):
        self.calls.append({"url": url, "data": data, "timeout": timeout})
        if self.error:
            raise self.error

        def raise_for_status():
            if self.status_error:
                raise self.status_error

        def json():
            if isinstance(self.body, Exception):
                raise self.body
            return self.body

        return types.SimpleNamespace(raise_for_status=raise_for_status, json=json)


def test_callback_url_appends_settlement_params():
    url = callback_url(
        "https://api.test/api/payments/success/",
        transaction_id="tran_abc",
        amount=Decimal("100.00"),
        status="success",
    )

    parsed = urlparse(url)
    assert parse_qs(parsed.query) == {
        "transactionId": ["tran_abc"],
        "amount": ["100.00"],
        "status": ["success"],
    }


def test_build_payload_maps_billing_and_amount(config, billing):
    client = GatewayClient(config, session=FakeSession())

    payload = client.build_payload(billing, Decimal("150.00"), "tran_123")

    assert payload["store_id"] == "teststore"
    assert payload["store_passwd"] == "secret"
    assert payload["total_amount"] == "150.00"
    assert payload["currency"] == "BDT"
    assert payload["tran_id"] == "tran_123"
    assert payload["cus_name"] == "Tara Traveller"
    assert payload["cus_email"] == "traveller@example.com"
    assert payload["cus_phone"] == "01700000000"
    assert payload["cus_add1"] == "House 1, Road 2, Dhaka"
    assert payload["success_url"].startswith("https://api.test/api/payments/success/?")
    assert "transactionId=tran_123" in payload["fail_url"]
    assert "status=cancel" in payload["cancel_url"]


def test_initiate_posts_form_and_returns_redirect(config, billing):
    body = {"status": "SUCCESS", "GatewayPageURL": "https://sandbox.gateway.test/pay/xyz"}
    session = FakeSession(body=body)
    client = GatewayClient(config, session=session)

    result = client.initiate(billing, Decimal("100.00"), "tran_123")

    assert result.redirect_url == "https://sandbox.gateway.test/pay/xyz"
    assert result.raw_response == body
    [call] = session.calls
    assert call["url"] == config.payment_api
    assert call["timeout"] == 5.0
    assert call["data"]["tran_id"] == "tran_123"


@pytest.mark.parametrize(
    "body",
    [
        {"status": "FAILED", "failedreason": "Store Credential Error"},
        {"status": "SUCCESS"},
        ["not", "a", "dict"],
        ValueError("no json"),
    ],
)
def test_initiate_rejects_unusable_responses(config, billing, body):
    client = GatewayClient(config, session=FakeSession(body=body))

    with pytest.raises(GatewayError):
        client.initiate(billing, Decimal("100.00"), "tran_123")


def test_initiate_wraps_transport_errors(config, billing):
    client = GatewayClient(config, session=FakeSession(error=requests.Timeout("slow")))

    with pytest.raises(GatewayError) as excinfo:
        client.initiate(billing, Decimal("100.00"), "tran_123")

    assert excinfo.value.status_code == 502


def test_initiate_wraps_http_errors(config, billing):
    session = FakeSession(body={}, status_error=requests.HTTPError("500 Server Error"))
    client = GatewayClient(config, session=session)

    with pytest.raises(GatewayError):
        client.initiate(billing, Decimal("100.00"), "tran_123")


def test_stub_mode_never_calls_the_network(config, billing):
    stub_config = GatewayConfig(**{**config.__dict__, "use_stub": True, "preview_base_url": "https://app.test/"})
    session = FakeSession(error=AssertionError("network used"))
    client = GatewayClient(stub_config, session=session)

    result = client.initiate(billing, Decimal("42.50"), "tran_stub")

    assert result.redirect_url == "https://app.test/payments/preview?transactionId=tran_stub&amount=42.50"
    assert result.raw_response["stub"] is True
    assert session.calls == []


def test_from_settings_falls_back_to_stub_without_store_id(settings):
    settings.SSLCOMMERZ_USE_STUB = False
    settings.SSLCOMMERZ_STORE_ID = ""

    assert GatewayConfig.from_settings().use_stub is True

    settings.SSLCOMMERZ_STORE_ID = "store"
    assert GatewayConfig.from_settings().use_stub is False
