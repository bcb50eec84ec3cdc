from datetime import date
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from tours.models import Division, Tour, TourType


@pytest.fixture
def hill_trek(db):
    return TourType.objects.create(name="Hill Trek")


@pytest.fixture
def chattogram(db):
    return Division.objects.create(name="Chattogram")


@pytest.mark.django_db
def test_slugs_are_generated_and_unique(division, tour_type):
    first = Tour.objects.create(title="River Cruise", division=division, tour_type=tour_type)
    second = Tour.objects.create(title="River Cruise", division=division, tour_type=tour_type)

    assert first.slug == "river-cruise"
    assert second.slug == "river-cruise-2"
    assert division.slug == "khulna"


@pytest.mark.django_db
def test_end_date_before_start_date_is_invalid(division, tour_type):
    with pytest.raises(ValidationError):
        Tour.objects.create(
            title="Backwards Trip",
            start_date=date(2026, 12, 10),
            end_date=date(2026, 12, 1),
            division=division,
            tour_type=tour_type,
        )


@pytest.mark.django_db
def test_negative_cost_is_invalid(division, tour_type):
    with pytest.raises(ValidationError):
        Tour.objects.create(title="Free Money", cost_from=Decimal("-1"), division=division, tour_type=tour_type)


@pytest.mark.django_db
def test_tour_catalog_is_public_and_filterable(api_client, tour, chattogram, hill_trek):
    Tour.objects.create(
        title="Sajek Valley",
        location="Rangamati",
        cost_from=Decimal("6800"),
        division=chattogram,
        tour_type=hill_trek,
    )

    response = api_client.get("/api/tours/")
    assert response.status_code == 200
    assert {item["title"] for item in response.json()} == {"Sundarbans Expedition", "Sajek Valley"}

    response = api_client.get("/api/tours/", {"division": chattogram.pk})
    assert [item["title"] for item in response.json()] == ["Sajek Valley"]

    response = api_client.get("/api/tours/", {"tour_type": tour.tour_type_id})
    assert [item["title"] for item in response.json()] == ["Sundarbans Expedition"]

    response = api_client.get("/api/tours/", {"search": "rangamati"})
    assert [item["title"] for item in response.json()] == ["Sajek Valley"]


@pytest.mark.django_db
def test_tour_detail_by_slug(api_client, tour):
    response = api_client.get(f"/api/tours/{tour.slug}/")

    assert response.status_code == 200
    body = response.json()
    assert body["cost_from"] == "50.00"
    assert body["division_name"] == "Khulna"
    assert body["tour_type_name"] == "Wildlife"


@pytest.mark.django_db
def test_catalog_is_read_only(api_client, staff_user, division, tour_type):
    api_client.force_authenticate(user=staff_user)

    response = api_client.post(
        "/api/tours/",
        {"title": "Sneaky", "division": division.pk, "tour_type": tour_type.pk},
        format="json",
    )

    assert response.status_code == 405


@pytest.mark.django_db
def test_divisions_and_tour_types_are_listed(api_client, division, tour_type):
    assert api_client.get("/api/divisions/").json()[0]["slug"] == "khulna"
    assert api_client.get(f"/api/divisions/{division.slug}/").status_code == 200
    assert api_client.get("/api/tour-types/").json() == [{"id": tour_type.pk, "name": "Wildlife"}]


@pytest.mark.django_db
def test_staff_can_manage_divisions(api_client, staff_user):
    api_client.force_authenticate(user=staff_user)

    response = api_client.post(
        "/api/divisions/",
        {"name": "Sylhet", "description": "Tea country"},
        format="json",
    )
    assert response.status_code == 201
    assert response.json()["slug"] == "sylhet"

    response = api_client.patch("/api/divisions/sylhet/", {"description": "Hills and tea"}, format="json")
    assert response.status_code == 200
    assert Division.objects.get(slug="sylhet").description == "Hills and tea"

    assert api_client.delete("/api/divisions/sylhet/").status_code == 204
    assert not Division.objects.filter(slug="sylhet").exists()


@pytest.mark.django_db
def test_staff_can_manage_tour_types(api_client, staff_user):
    api_client.force_authenticate(user=staff_user)

    response = api_client.post("/api/tour-types/", {"name": "River Cruise"}, format="json")
    assert response.status_code == 201
    tour_type_id = response.json()["id"]

    response = api_client.put(f"/api/tour-types/{tour_type_id}/", {"name": "Boat Cruise"}, format="json")
    assert response.status_code == 200
    assert TourType.objects.get(pk=tour_type_id).name == "Boat Cruise"

    assert api_client.delete(f"/api/tour-types/{tour_type_id}/").status_code == 204


@pytest.mark.django_db
def test_catalog_terms_in_use_cannot_be_deleted(api_client, staff_user, tour):
    api_client.force_authenticate(user=staff_user)

    response = api_client.delete(f"/api/tour-types/{tour.tour_type_id}/")

    assert response.status_code == 409
    assert response.json()["success"] is False
    assert TourType.objects.filter(pk=tour.tour_type_id).exists()


@pytest.mark.django_db
def test_catalog_writes_are_staff_only(api_client, traveller, division, tour_type):
    assert api_client.post("/api/tour-types/", {"name": "Anonymous"}, format="json").status_code == 401

    api_client.force_authenticate(user=traveller)
    assert api_client.post("/api/divisions/", {"name": "Barishal"}, format="json").status_code == 403
    assert api_client.patch(f"/api/tour-types/{tour_type.pk}/", {"name": "Renamed"}, format="json").status_code == 403
    assert api_client.delete(f"/api/divisions/{division.slug}/").status_code == 403
    assert TourType.objects.get(pk=tour_type.pk).name == "Wildlife"
