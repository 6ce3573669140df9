from django.db.models import Q
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import Action, Resource, RoleGate

from . import services
from .models import Dispute
from .serializers import (
    DisputeCloseSerializer,
    DisputeCreateSerializer,
    DisputeResolutionSerializer,
    DisputeSerializer,
)


class DisputeViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Disputes I reported or that concern my bookings."""

    serializer_class = DisputeSerializer
    permission_classes = [IsAuthenticated, RoleGate]
    gate_rules = {"create": (Resource.DISPUTE, Action.CREATE)}
    filterset_fields = ["status"]

    def get_queryset(self):
        user = self.request.user
        return Dispute.objects.filter(
            Q(reporter=user) | Q(booking__renter=user) | Q(booking__owner=user)
        ).select_related("reporter", "booking").distinct()

    def create(self, request, *args, **kwargs):
        serializer = DisputeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        booking_id = data.pop("booking_id")
        dispute = services.create_dispute(reporter=request.user, booking_id=booking_id, data=data)
        return Response(DisputeSerializer(dispute).data, status=status.HTTP_201_CREATED)


class AdminDisputeViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = DisputeSerializer
    permission_classes = [IsAuthenticated, RoleGate]
    gate_rules = {"*": (Resource.DISPUTE, Action.MANAGE)}
    filterset_fields = ["status", "dispute_type"]
    search_fields = ["title", "reporter__email"]
    ordering_fields = ["created_at"]

    def get_queryset(self):
        return Dispute.objects.select_related("reporter", "booking", "resolved_by")

    @action(detail=True, methods=["post"], url_path="investigate")
    def investigate(self, request, pk=None):
        dispute = services.investigate(admin=request.user, dispute=self.get_object())
        return Response(self.get_serializer(dispute).data)

    @action(detail=True, methods=["post"], url_path="resolve")
    def resolve(self, request, pk=None):
        serializer = DisputeResolutionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dispute = services.resolve(
            admin=request.user,
            dispute=self.get_object(),
            resolution=serializer.validated_data["resolution"],
        )
        return Response(self.get_serializer(dispute).data)

    @action(detail=True, methods=["post"], url_path="close")
    def close(self, request, pk=None):
        serializer = DisputeCloseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dispute = services.close(
            admin=request.user,
            dispute=self.get_object(),
            resolution=serializer.validated_data["resolution"],
        )
        return Response(self.get_serializer(dispute).data)
