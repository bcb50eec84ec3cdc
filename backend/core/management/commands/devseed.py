from datetime import date
from decimal import Decimal

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import User
from tours.models import Division, Tour, TourType


SEED_PASSWORD = "TourBooking123!"
SUPERUSER_EMAIL = "admin@tourbooking.test"
SUPERUSER_PASSWORD = "AdminTourBooking123!"

TOURS = [
    {
        "title": "Sundarbans Mangrove Expedition",
        "division": "Khulna",
        "tour_type": "Wildlife",
        "location": "Sundarbans",
        "cost_from": Decimal("12500.00"),
        "start_date": date(2026, 12, 5),
        "end_date": date(2026, 12, 8),
        "max_guest": 12,
        "min_age": 10,
        "departure_location": "Khulna Launch Ghat",
        "arrival_location": "Khulna Launch Ghat",
        "included": ["Boat stay", "Meals", "Forest permits"],
        "excluded": ["Personal expenses"],
        "amenities": ["Life jackets", "Guide"],
        "tour_plan": ["Day 1: Kotka", "Day 2: Kochikhali", "Day 3: Harbaria"],
    },
    {
        "title": "Sajek Valley Getaway",
        "division": "Chattogram",
        "tour_type": "Hill Trek",
        "location": "Sajek, Rangamati",
        "cost_from": Decimal("6800.00"),
        "start_date": date(2026, 11, 14),
        "end_date": date(2026, 11, 16),
        "max_guest": 16,
        "min_age": 8,
        "departure_location": "Dhaka",
        "arrival_location": "Dhaka",
        "included": ["Transport", "Resort stay"],
        "excluded": ["Lunch"],
        "amenities": ["Jeep transfer"],
        "tour_plan": ["Day 1: Khagrachari", "Day 2: Konglak Para"],
    },
    {
        "title": "Srimangal Tea Garden Walk",
        "division": "Sylhet",
        "tour_type": "Day Trip",
        "location": "Srimangal",
        "cost_from": Decimal("2500.00"),
        "max_guest": 20,
        "departure_location": "Srimangal Station",
        "arrival_location": "Srimangal Station",
        "included": ["Guide", "Tea tasting"],
    },
]


class Command(BaseCommand):
    help = "Populate the local development database with sample data."

    def handle(self, *args, **options):
        if not settings.DEBUG:
            raise CommandError("Refusing to seed data while DEBUG is False.")

        with transaction.atomic():
            self.stdout.write(self.style.MIGRATE_HEADING("Creating users"))
            traveller = self._ensure_user(
                email="traveller@tourbooking.test",
                name="Tasnim Traveller",
                phone="01700000001",
                address="House 12, Road 5, Dhanmondi, Dhaka",
            )
            self._ensure_user(email="newcomer@tourbooking.test", name="Nabil Newcomer")

            self.stdout.write(self.style.MIGRATE_HEADING("Ensuring admin superuser"))
            self._ensure_superuser()

            self.stdout.write(self.style.MIGRATE_HEADING("Creating tour catalog"))
            for data in TOURS:
                tour = self._ensure_tour(dict(data))
                self.stdout.write(f"  • {tour.title} ({tour.slug})")

        self.stdout.write(self.style.SUCCESS("Seed data ready."))
        self.stdout.write(
            f"Log in as {traveller.email} / {SEED_PASSWORD} or {SUPERUSER_EMAIL} / {SUPERUSER_PASSWORD}"
        )

    def _ensure_user(self, email: str, name: str, phone: str = "", address: str = "") -> User:
        user, created = User.objects.get_or_create(
            email=email,
            defaults={"username": email, "name": name, "phone": phone, "address": address},
        )
        if created:
            user.set_password(SEED_PASSWORD)
            user.save()
            return user

        fields_to_update = {
            attr: value
            for attr, value in (("name", name), ("phone", phone), ("address", address))
            if getattr(user, attr) != value
        }
        if fields_to_update:
            for attr, value in fields_to_update.items():
                setattr(user, attr, value)
            user.save(update_fields=list(fields_to_update.keys()))
        return user

    def _ensure_superuser(self) -> User:
        user, created = User.objects.get_or_create(
            email=SUPERUSER_EMAIL,
            defaults={
                "username": SUPERUSER_EMAIL,
                "name": "Admin User",
                "is_staff": True,
                "is_superuser": True,
            },
        )
        flag_updates = {}
        if not user.is_staff:
            flag_updates["is_staff"] = True
        if not user.is_superuser:
            flag_updates["is_superuser"] = True
        if flag_updates:
            for attr, value in flag_updates.items():
                setattr(user, attr, value)
            user.save(update_fields=list(flag_updates.keys()))
        if created or not user.has_usable_password():
            user.set_password(SUPERUSER_PASSWORD)
            user.save(update_fields=["password"])
        return user

    def _ensure_tour(self, data: dict) -> Tour:
        division, _ = Division.objects.get_or_create(name=data.pop("division"))
        tour_type, _ = TourType.objects.get_or_create(name=data.pop("tour_type"))
        title = data.pop("title")
        tour = Tour.objects.filter(title=title).first() or Tour(title=title)
        for attr, value in data.items():
            setattr(tour, attr, value)
        tour.division = division
        tour.tour_type = tour_type
        tour.save()
        return tour
