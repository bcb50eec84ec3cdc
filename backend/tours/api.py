from django.db.models import ProtectedError
from rest_framework import permissions, viewsets

from core.exceptions import ConflictError

from .models import Division, Tour, TourType
from .serializers import DivisionSerializer, TourSerializer, TourTypeSerializer


class ReadAnyWriteAdmin(permissions.BasePermission):
    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_staff)


class TourViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = TourSerializer
    permission_classes = [permissions.AllowAny]
    lookup_field = "slug"
    filterset_fields = ["division", "tour_type"]
    search_fields = ["title", "location", "description"]
    ordering_fields = ["cost_from", "start_date", "created_at"]

    def get_queryset(self):
        return Tour.objects.select_related("division", "tour_type")


class CatalogTermViewSet(viewsets.ModelViewSet):
    """Public listing; staff create, rename and remove terms no tour still uses."""

    permission_classes = [ReadAnyWriteAdmin]

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError:
            raise ConflictError(f"{instance} is still used by one or more tours.")


class DivisionViewSet(CatalogTermViewSet):
    queryset = Division.objects.all()
    serializer_class = DivisionSerializer
    lookup_field = "slug"


class TourTypeViewSet(CatalogTermViewSet):
    queryset = TourType.objects.all()
    serializer_class = TourTypeSerializer
