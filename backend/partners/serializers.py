from rest_framework import serializers

from accounts.serializers import UserSummarySerializer

from .models import PartnerApplication


class PartnerApplicationSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = PartnerApplication
        fields = [
            "id",
            "user",
            "business_name",
            "business_address",
            "business_phone",
            "business_description",
            "status",
            "rejection_reason",
            "submitted_at",
            "decided_at",
            "decided_by",
        ]
        read_only_fields = [
            "id",
            "user",
            "status",
            "rejection_reason",
            "submitted_at",
            "decided_at",
            "decided_by",
        ]


class ApplicationRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(allow_blank=False)
