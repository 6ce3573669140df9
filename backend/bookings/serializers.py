from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from bookings.models import Booking


class BookingSerializer(serializers.ModelSerializer):
    game_name = serializers.CharField(source="game.name", read_only=True)
    renter = UserSummarySerializer(read_only=True)
    owner = UserSummarySerializer(read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "game",
            "game_name",
            "renter",
            "owner",
            "start_date",
            "end_date",
            "rental_days",
            "daily_price",
            "total_rent",
            "deposit",
            "total_amount",
            "status",
            "notes",
            "handover_at",
            "return_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingCreateSerializer(serializers.Serializer):
    game_id = serializers.IntegerField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Booking.STATUSES)
