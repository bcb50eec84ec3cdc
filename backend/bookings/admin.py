from django.contrib import admin

from core.admin import ReadOnlyAdmin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(ReadOnlyAdmin):
    list_display = ("id", "tour", "user", "guest_count", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("tour__title", "user__email", "payment__transaction_id")
    list_select_related = ("tour", "user", "payment")
