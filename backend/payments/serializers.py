from rest_framework import serializers

from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = [
            "id",
            "transaction_id",
            "amount",
            "status",
            "invoice_url",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
