import mimetypes

from django.db.models import ProtectedError
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import Action, Resource, RoleGate, can_manage
from core.exceptions import RuleViolation

from . import services
from .models import Category, Game, GameImage
from .serializers import (
    CategorySerializer,
    GameAdminSerializer,
    GameImageSerializer,
    GameRejectSerializer,
    GameSerializer,
    PartnerGameSerializer,
)


class CategoryViewSet(viewsets.ModelViewSet):
    """Public category listing; admins create, edit, toggle and delete."""

    serializer_class = CategorySerializer
    gate_rules = {
        "create": (Resource.CATEGORY, Action.MANAGE),
        "update": (Resource.CATEGORY, Action.MANAGE),
        "partial_update": (Resource.CATEGORY, Action.MANAGE),
        "destroy": (Resource.CATEGORY, Action.MANAGE),
        "toggle": (Resource.CATEGORY, Action.MANAGE),
    }
    search_fields = ["name"]
    pagination_class = None

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [AllowAny()]
        return [IsAuthenticated(), RoleGate()]

    def get_queryset(self):
        queryset = Category.objects.all()
        user = self.request.user
        if not (user.is_authenticated and can_manage(user.role, Resource.CATEGORY, Action.MANAGE)):
            queryset = queryset.filter(is_active=True)
        return queryset

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError as exc:
            raise RuleViolation("Category still has games; deactivate it instead.") from exc

    @action(detail=True, methods=["patch"], url_path="toggle")
    def toggle(self, request, pk=None):
        category = self.get_object()
        category.is_active = not category.is_active
        category.save(update_fields=["is_active"])
        return Response(self.get_serializer(category).data)


class GameViewSet(viewsets.ReadOnlyModelViewSet):
    """Browse and search approved, active listings."""

    serializer_class = GameSerializer
    permission_classes = [AllowAny]
    filterset_fields = ["category", "platform", "condition"]
    search_fields = ["name", "description", "platform"]
    ordering_fields = ["price_per_day", "created_at", "name"]

    def get_queryset(self):
        return (
            Game.objects.filter(approval_status=Game.APPROVAL_APPROVED, is_active=True)
            .select_related("category", "owner")
            .prefetch_related("images")
        )


class PartnerGameViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """A partner's own listings, including pending and rejected ones."""

    serializer_class = PartnerGameSerializer
    permission_classes = [IsAuthenticated, RoleGate]
    gate_rules = {
        "create": (Resource.CATALOG, Action.CREATE),
        "*": (Resource.CATALOG, Action.UPDATE),
    }
    filterset_fields = ["approval_status", "category"]
    search_fields = ["name"]

    MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5 MB
    ALLOWED_CONTENT_TYPES = {"image/png", "image/jpeg", "image/webp"}

    def get_queryset(self):
        return (
            Game.objects.filter(owner=self.request.user)
            .select_related("category")
            .prefetch_related("images")
        )

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        game = services.create_partner_game(
            partner=request.user, data=serializer.validated_data
        )
        output = self.get_serializer(game)
        return Response(output.data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        game = self.get_object()
        serializer = self.get_serializer(game, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        game = services.update_partner_game(
            partner=request.user, game=game, data=serializer.validated_data
        )
        return Response(self.get_serializer(game).data)

    @action(
        detail=True,
        methods=["post"],
        url_path="images",
        parser_classes=[MultiPartParser, FormParser],
    )
    def upload_image(self, request, pk=None):
        game = self.get_object()
        image_file = request.FILES.get("image")
        if image_file is None:
            return Response({"detail": "image file is required."}, status=status.HTTP_400_BAD_REQUEST)

        if image_file.size > self.MAX_IMAGE_BYTES:
            return Response(
                {"detail": "Image must be 5 MB or smaller."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        content_type = image_file.content_type or mimetypes.guess_type(image_file.name)[0]
        if content_type not in self.ALLOWED_CONTENT_TYPES:
            return Response(
                {"detail": "Unsupported file type. Upload PNG, JPEG, or WebP."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        position = game.images.count()
        image = GameImage.objects.create(game=game, image=image_file, position=position)
        serializer = GameImageSerializer(image, context={"request": request})
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["delete"], url_path=r"images/(?P<image_id>\d+)")
    def delete_image(self, request, pk=None, image_id=None):
        game = self.get_object()
        image = game.images.filter(pk=image_id).first()
        if image is None:
            return Response({"detail": "Image not found."}, status=status.HTTP_404_NOT_FOUND)
        image.image.delete(save=False)
        image.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminGameViewSet(viewsets.ReadOnlyModelViewSet):
    """Moderation queue: every listing regardless of approval state."""

    serializer_class = GameAdminSerializer
    permission_classes = [IsAuthenticated, RoleGate]
    gate_rules = {"*": (Resource.CATALOG, Action.MANAGE)}
    filterset_fields = ["approval_status", "category", "is_active", "owner"]
    search_fields = ["name", "owner__email"]
    ordering_fields = ["created_at", "name"]

    def get_queryset(self):
        return Game.objects.select_related("category", "owner", "approved_by").prefetch_related(
            "images"
        )

    @action(detail=True, methods=["post"], url_path="approve")
    def approve(self, request, pk=None):
        game = services.approve_game(admin=request.user, game=self.get_object())
        return Response(self.get_serializer(game).data)

    @action(detail=True, methods=["post"], url_path="reject")
    def reject(self, request, pk=None):
        serializer = GameRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        game = services.reject_game(
            admin=request.user,
            game=self.get_object(),
            reason=serializer.validated_data["reason"],
        )
        return Response(self.get_serializer(game).data)
