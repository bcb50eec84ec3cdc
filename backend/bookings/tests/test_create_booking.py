import types
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.db.models import QuerySet

from bookings.models import Booking
from bookings.services import bookings as booking_service
from core.exceptions import BookingValidationError, ConflictError, GatewayError, NotFoundError
from payments.models import Payment

User = get_user_model()


class RecordingGateway:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def initiate(self, billing, amount, transaction_id):
        self.calls.append({"billing": billing, "amount": amount, "transaction_id": transaction_id})
        if self.error:
            raise self.error
        return types.SimpleNamespace(
            redirect_url=f"https://gateway.test/pay/{transaction_id}",
            raw_response={"status": "SUCCESS", "sessionkey": "abc"},
        )


@pytest.fixture
def gateway(monkeypatch):
    fake = RecordingGateway()
    monkeypatch.setattr(booking_service, "get_gateway_client", lambda: fake)
    return fake


@pytest.mark.django_db
def test_create_booking_links_booking_and_unpaid_payment(traveller, tour, gateway):
    result = booking_service.create_booking({"tour": tour.pk, "guest_count": 2}, traveller.pk)

    booking = Booking.objects.get()
    payment = Payment.objects.get()
    assert result.booking.pk == booking.pk
    assert booking.status == Booking.PENDING
    assert booking.payment_id == payment.pk
    assert payment.booking_id == booking.pk
    assert payment.status == Payment.UNPAID
    assert payment.amount == Decimal("100.00")
    assert payment.transaction_id.startswith("tran_")
    assert payment.gateway_data == {"init": {"status": "SUCCESS", "sessionkey": "abc"}}
    assert result.payment_url == f"https://gateway.test/pay/{payment.transaction_id}"


@pytest.mark.django_db
def test_create_booking_sends_billing_details_to_gateway(traveller, tour, gateway):
    booking_service.create_booking({"tour": tour.pk, "guest_count": 3}, traveller.pk)

    [call] = gateway.calls
    assert call["amount"] == Decimal("150.00")
    assert call["billing"].email == "traveller@example.com"
    assert call["billing"].phone == "01700000000"
    assert call["billing"].address == "House 1, Road 2, Dhaka"
    assert call["billing"].name == "Tara Traveller"


@pytest.mark.django_db
def test_result_booking_is_populated(traveller, tour, gateway, django_assert_num_queries):
    result = booking_service.create_booking({"tour": tour.pk, "guest_count": 1}, traveller.pk)

    with django_assert_num_queries(0):
        assert result.booking.user.email == traveller.email
        assert result.booking.tour.title == tour.title
        assert result.booking.payment.amount == Decimal("50.00")


@pytest.mark.django_db
def test_gateway_failure_rolls_back_booking_and_payment(monkeypatch, traveller, tour):
    fake = RecordingGateway(error=GatewayError("Payment gateway rejected the request: bad store"))
    monkeypatch.setattr(booking_service, "get_gateway_client", lambda: fake)

    with pytest.raises(GatewayError):
        booking_service.create_booking({"tour": tour.pk, "guest_count": 2}, traveller.pk)

    assert Booking.objects.count() == 0
    assert Payment.objects.count() == 0


@pytest.mark.django_db
@pytest.mark.parametrize("guests", [0, -3])
def test_non_positive_guest_count_is_rejected(traveller, tour, gateway, guests):
    with pytest.raises(BookingValidationError):
        booking_service.create_booking({"tour": tour.pk, "guest_count": guests}, traveller.pk)

    assert Booking.objects.count() == 0
    assert gateway.calls == []


@pytest.mark.django_db
@pytest.mark.parametrize("field", ["phone", "address"])
def test_incomplete_billing_profile_is_rejected(traveller, tour, gateway, field):
    setattr(traveller, field, "")
    traveller.save()

    with pytest.raises(BookingValidationError) as excinfo:
        booking_service.create_booking({"tour": tour.pk, "guest_count": 1}, traveller.pk)

    assert "phone and address" in str(excinfo.value.detail)
    assert Booking.objects.count() == 0


@pytest.mark.django_db
def test_unknown_user_is_not_found(tour, gateway):
    with pytest.raises(NotFoundError):
        booking_service.create_booking({"tour": tour.pk, "guest_count": 1}, 999999)


@pytest.mark.django_db
def test_missing_tour_is_not_found(traveller, gateway):
    with pytest.raises(NotFoundError):
        booking_service.create_booking({"tour": 424242, "guest_count": 1}, traveller.pk)


@pytest.mark.django_db
def test_tour_without_price_is_not_found(traveller, tour, gateway):
    tour.cost_from = None
    tour.save()

    with pytest.raises(NotFoundError):
        booking_service.create_booking({"tour": tour.pk, "guest_count": 1}, traveller.pk)

    assert Payment.objects.count() == 0


@pytest.mark.django_db
def test_second_unpaid_booking_for_same_tour_conflicts(traveller, tour, gateway):
    booking_service.create_booking({"tour": tour.pk, "guest_count": 1}, traveller.pk)

    with pytest.raises(ConflictError):
        booking_service.create_booking({"tour": tour.pk, "guest_count": 2}, traveller.pk)

    assert Booking.objects.count() == 1


@pytest.mark.django_db
def test_new_booking_allowed_once_previous_one_settled(traveller, tour, gateway):
    first = booking_service.create_booking({"tour": tour.pk, "guest_count": 1}, traveller.pk)
    Payment.objects.filter(pk=first.booking.payment_id).update(status=Payment.FAILED)
    Booking.objects.filter(pk=first.booking.pk).update(status=Booking.FAILED)

    booking_service.create_booking({"tour": tour.pk, "guest_count": 1}, traveller.pk)

    assert Booking.objects.count() == 2
    assert Payment.objects.filter(status=Payment.UNPAID).count() == 1


@pytest.mark.django_db
def test_stub_gateway_returns_preview_url(traveller, tour):
    result = booking_service.create_booking({"tour": tour.pk, "guest_count": 2}, traveller.pk)

    payment = Payment.objects.get()
    assert result.payment_url.startswith("https://app.test/payments/preview?")
    assert f"transactionId={payment.transaction_id}" in result.payment_url
    assert payment.gateway_data["init"]["stub"] is True


@pytest.mark.django_db
def test_create_booking_locks_the_user_row(traveller, tour, gateway, monkeypatch):
    locked = []
    original = QuerySet.select_for_update

    def recording_select_for_update(queryset, *args, **kwargs):
        locked.append(queryset.model)
        return original(queryset, *args, **kwargs)

    monkeypatch.setattr(QuerySet, "select_for_update", recording_select_for_update)

    booking_service.create_booking({"tour": tour.pk, "guest_count": 1}, traveller.pk)

    assert locked[0] is User
