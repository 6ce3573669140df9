from rest_framework import serializers

from payments.models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = [
            "id",
            "booking",
            "provider",
            "provider_txn_id",
            "amount",
            "currency",
            "status",
            "payment_type",
            "method",
            "redirect_url",
            "failure_reason",
            "paid_at",
            "failed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PaymentAdminSerializer(PaymentSerializer):
    class Meta(PaymentSerializer.Meta):
        fields = PaymentSerializer.Meta.fields + ["provider_payment_intent"]
        read_only_fields = fields


class PaymentCreateSerializer(serializers.Serializer):
    payment_type = serializers.ChoiceField(choices=Payment.PAYMENT_TYPES, default=Payment.TYPE_CARD)
