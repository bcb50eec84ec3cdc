from django.contrib import admin


class ReadOnlyAdmin(admin.ModelAdmin):
    """Inspect-only admin for records that settlement services own."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
