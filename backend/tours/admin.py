from django.contrib import admin

from .models import Division, Tour, TourType


@admin.register(Division)
class DivisionAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "created_at")
    search_fields = ("name",)
    prepopulated_fields = {"slug": ("name",)}


@admin.register(TourType)
class TourTypeAdmin(admin.ModelAdmin):
    list_display = ("name",)
    search_fields = ("name",)


@admin.register(Tour)
class TourAdmin(admin.ModelAdmin):
    list_display = ("title", "division", "tour_type", "cost_from", "start_date", "end_date")
    list_filter = ("division", "tour_type")
    search_fields = ("title", "location")
    prepopulated_fields = {"slug": ("title",)}
