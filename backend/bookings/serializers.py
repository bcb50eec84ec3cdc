from rest_framework import serializers

from payments.serializers import PaymentSerializer
from tours.serializers import TourSummarySerializer

from .models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """Shape check only; business rules run in ``create_booking``."""

    tour = serializers.IntegerField()
    guest_count = serializers.IntegerField()


class BookingSerializer(serializers.ModelSerializer):
    tour = TourSummarySerializer(read_only=True)
    payment = PaymentSerializer(read_only=True)
    user_email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "user",
            "user_email",
            "tour",
            "guest_count",
            "status",
            "payment",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
