from django.contrib import admin

from core.admin import ReadOnlyAdmin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(ReadOnlyAdmin):
    list_display = ("transaction_id", "booking", "amount", "status", "updated_at")
    list_filter = ("status",)
    search_fields = ("transaction_id", "booking__user__email")
