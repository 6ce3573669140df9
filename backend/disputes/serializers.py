from rest_framework import serializers

from accounts.serializers import UserSummarySerializer

from .models import Dispute


class DisputeSerializer(serializers.ModelSerializer):
    reporter = UserSummarySerializer(read_only=True)

    class Meta:
        model = Dispute
        fields = [
            "id",
            "booking",
            "reporter",
            "dispute_type",
            "title",
            "description",
            "status",
            "resolution",
            "resolved_by",
            "resolved_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class DisputeCreateSerializer(serializers.Serializer):
    booking_id = serializers.IntegerField()
    dispute_type = serializers.ChoiceField(choices=Dispute.TYPES)
    title = serializers.CharField(max_length=200)
    description = serializers.CharField()


class DisputeResolutionSerializer(serializers.Serializer):
    resolution = serializers.CharField(allow_blank=False)


class DisputeCloseSerializer(serializers.Serializer):
    resolution = serializers.CharField(required=False, allow_blank=True, default="")
