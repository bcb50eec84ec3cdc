from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from bookings.models import Booking
from bookings.serializers import BookingCreateSerializer, BookingSerializer
from bookings.services.bookings import create_booking


class BookingViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["status", "tour"]
    ordering_fields = ["created_at", "guest_count"]

    def get_queryset(self):
        queryset = Booking.objects.select_related("user", "tour", "payment")
        user = self.request.user
        if self.action == "list" or user.is_staff:
            return queryset
        return queryset.filter(user=user)

    def list(self, request, *args, **kwargs):
        if not request.user.is_staff:
            raise PermissionDenied("Only staff can list all bookings.")
        return super().list(request, *args, **kwargs)

    def create(self, request, *args, **kwargs):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = create_booking(serializer.validated_data, request.user.pk)
        return Response(
            {
                "success": True,
                "message": "Booking created successfully",
                "booking": BookingSerializer(result.booking).data,
                "payment_url": result.payment_url,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["get"], url_path="my-bookings")
    def my_bookings(self, request):
        queryset = self.filter_queryset(
            Booking.objects.select_related("user", "tour", "payment").filter(user=request.user)
        )
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(BookingSerializer(page, many=True).data)
        return Response(BookingSerializer(queryset, many=True).data)
