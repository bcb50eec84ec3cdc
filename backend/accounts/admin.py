from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import User


@admin.register(User)
class TourUserAdmin(UserAdmin):
    list_display = ("email", "name", "phone", "is_staff", "is_active")
    search_fields = ("email", "name", "phone")
    ordering = ("email",)
    fieldsets = UserAdmin.fieldsets + (
        ("Billing profile", {"fields": ("name", "phone", "address")}),
    )
