from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db.models import Avg, Count, Sum
from django.db.models.functions import Trim
from django.utils import timezone

from bookings.models import Booking
from payments.models import Payment
from tours.models import Tour

TOP_TOURS_LIMIT = 5


def _counts_by_status(queryset, statuses) -> dict:
    counts = {code: 0 for code, _label in statuses}
    for row in queryset.values("status").annotate(count=Count("id")):
        counts[row["status"]] = row["count"]
    return counts


def _money(value) -> str:
    return f"{(value or Decimal('0')):.2f}"


def booking_stats() -> dict:
    now = timezone.now()
    bookings = Booking.objects.all()

    top_tours = (
        bookings.values("tour_id", "tour__title", "tour__slug")
        .annotate(booking_count=Count("id"))
        .order_by("-booking_count", "tour__title")[:TOP_TOURS_LIMIT]
    )
    average_guests = bookings.aggregate(value=Avg("guest_count"))["value"]

    return {
        "total_bookings": bookings.count(),
        "by_status": _counts_by_status(bookings, Booking.STATUSES),
        "top_tours": [
            {
                "tour": row["tour_id"],
                "title": row["tour__title"],
                "slug": row["tour__slug"],
                "booking_count": row["booking_count"],
            }
            for row in top_tours
        ],
        "average_guest_count": round(float(average_guests), 2) if average_guests is not None else 0,
        "bookings_last_7_days": bookings.filter(created_at__gte=now - timedelta(days=7)).count(),
        "bookings_last_30_days": bookings.filter(created_at__gte=now - timedelta(days=30)).count(),
        "unique_users": bookings.order_by().values("user_id").distinct().count(),
    }


def payment_stats() -> dict:
    payments = Payment.objects.all()
    paid = payments.filter(status=Payment.PAID).aggregate(
        revenue=Sum("amount"),
        average=Avg("amount"),
    )
    return {
        "total_payments": payments.count(),
        "by_status": _counts_by_status(payments, Payment.STATUSES),
        "total_revenue": _money(paid["revenue"]),
        "average_paid_amount": _money(paid["average"]),
    }


def user_stats() -> dict:
    now = timezone.now()
    users = get_user_model().objects.all()
    billing_ready = (
        users.annotate(phone_trimmed=Trim("phone"), address_trimmed=Trim("address"))
        .exclude(phone_trimmed="")
        .exclude(address_trimmed="")
    )
    return {
        "total_users": users.count(),
        "staff_users": users.filter(is_staff=True).count(),
        "active_users": users.filter(is_active=True).count(),
        "inactive_users": users.filter(is_active=False).count(),
        "users_with_billing_profile": billing_ready.count(),
        "new_users_last_7_days": users.filter(date_joined__gte=now - timedelta(days=7)).count(),
        "new_users_last_30_days": users.filter(date_joined__gte=now - timedelta(days=30)).count(),
    }


def _counts_by(queryset, field: str) -> list:
    rows = (
        queryset.order_by()
        .values(field)
        .annotate(tour_count=Count("id"))
        .order_by("-tour_count", field)
    )
    return [{"name": row[field], "tour_count": row["tour_count"]} for row in rows]


def tour_stats() -> dict:
    tours = Tour.objects.all()
    average_cost = tours.aggregate(value=Avg("cost_from"))["value"]
    most_booked = (
        tours.annotate(booking_count=Count("bookings"))
        .filter(booking_count__gt=0)
        .order_by("-booking_count", "title")[:TOP_TOURS_LIMIT]
    )
    return {
        "total_tours": tours.count(),
        "by_tour_type": _counts_by(tours, "tour_type__name"),
        "by_division": _counts_by(tours, "division__name"),
        "average_cost_from": _money(average_cost),
        "most_booked": [
            {
                "tour": tour.pk,
                "title": tour.title,
                "slug": tour.slug,
                "booking_count": tour.booking_count,
            }
            for tour in most_booked
        ],
    }
