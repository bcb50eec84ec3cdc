from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from tours.models import Division, Tour, TourType

User = get_user_model()


@pytest.fixture(autouse=True)
def offline_gateway(settings, tmp_path):
    settings.SSLCOMMERZ_USE_STUB = True
    settings.SSLCOMMERZ_STORE_ID = ""
    settings.FRONTEND_URL = "https://app.test"
    settings.SSLCOMMERZ_SUCCESS_FRONTEND_URL = "https://app.test/payment/success"
    settings.SSLCOMMERZ_FAIL_FRONTEND_URL = "https://app.test/payment/fail"
    settings.SSLCOMMERZ_CANCEL_FRONTEND_URL = "https://app.test/payment/cancel"
    settings.MEDIA_ROOT = str(tmp_path / "media")


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def traveller(db):
    return User.objects.create_user(
        username="traveller@example.com",
        email="traveller@example.com",
        password="examplepass",
        name="Tara Traveller",
        phone="01700000000",
        address="House 1, Road 2, Dhaka",
    )


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(
        username="staff@example.com",
        email="staff@example.com",
        password="examplepass",
        name="Sam Staff",
        is_staff=True,
    )


@pytest.fixture
def division(db):
    return Division.objects.create(name="Khulna")


@pytest.fixture
def tour_type(db):
    return TourType.objects.create(name="Wildlife")


@pytest.fixture
def tour(division, tour_type):
    return Tour.objects.create(
        title="Sundarbans Expedition",
        location="Sundarbans",
        cost_from=Decimal("50.00"),
        division=division,
        tour_type=tour_type,
    )
