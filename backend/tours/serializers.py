from rest_framework import serializers

from .models import Division, Tour, TourType


class DivisionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Division
        fields = ["id", "name", "slug", "description"]
        read_only_fields = ["slug"]


class TourTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = TourType
        fields = ["id", "name"]


class TourSummarySerializer(serializers.ModelSerializer):
    """Compact tour representation embedded in booking payloads."""

    class Meta:
        model = Tour
        fields = ["id", "title", "slug", "location", "cost_from"]


class TourSerializer(serializers.ModelSerializer):
    division_name = serializers.CharField(source="division.name", read_only=True)
    tour_type_name = serializers.CharField(source="tour_type.name", read_only=True)

    class Meta:
        model = Tour
        fields = [
            "id",
            "title",
            "slug",
            "description",
            "location",
            "cost_from",
            "start_date",
            "end_date",
            "included",
            "excluded",
            "amenities",
            "tour_plan",
            "max_guest",
            "min_age",
            "departure_location",
            "arrival_location",
            "division",
            "division_name",
            "tour_type",
            "tour_type_name",
        ]
