from rest_framework import serializers

from .models import Category, Game, GameImage


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "description", "is_active", "created_at"]
        read_only_fields = ["id", "created_at"]


class GameImageSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField()

    class Meta:
        model = GameImage
        fields = ["id", "url", "position"]
        read_only_fields = fields

    def get_url(self, obj) -> str:
        request = self.context.get("request")
        url = obj.image.url
        if request is not None:
            return request.build_absolute_uri(url)
        return url


class GameSerializer(serializers.ModelSerializer):
    """Public view of a listing."""

    category_name = serializers.CharField(source="category.name", read_only=True)
    owner_name = serializers.CharField(source="owner.full_name", read_only=True)
    images = GameImageSerializer(many=True, read_only=True)

    class Meta:
        model = Game
        fields = [
            "id",
            "name",
            "description",
            "platform",
            "condition",
            "category",
            "category_name",
            "owner",
            "owner_name",
            "stock",
            "available_stock",
            "price_per_day",
            "deposit",
            "images",
        ]
        read_only_fields = fields


class GameAdminSerializer(GameSerializer):
    class Meta(GameSerializer.Meta):
        fields = GameSerializer.Meta.fields + [
            "approval_status",
            "approved_by",
            "approved_at",
            "rejection_reason",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PartnerGameSerializer(serializers.ModelSerializer):
    """Partner-facing create/update payload; approval fields stay read-only."""

    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.filter(is_active=True))
    images = GameImageSerializer(many=True, read_only=True)

    class Meta:
        model = Game
        fields = [
            "id",
            "name",
            "description",
            "platform",
            "condition",
            "category",
            "stock",
            "available_stock",
            "price_per_day",
            "deposit",
            "approval_status",
            "rejection_reason",
            "is_active",
            "images",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "available_stock",
            "approval_status",
            "rejection_reason",
            "is_active",
            "images",
            "created_at",
            "updated_at",
        ]

    def validate_price_per_day(self, value):
        if value <= 0:
            raise serializers.ValidationError("Price per day must be greater than zero.")
        return value


class GameRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(allow_blank=False)
