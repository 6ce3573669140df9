from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import Action, Resource, RoleGate
from core.exceptions import NotFound, NotOwned

from .models import Booking
from .serializers import BookingCreateSerializer, BookingSerializer, BookingStatusSerializer
from .services import lifecycle


def _booking_queryset():
    return Booking.objects.select_related("game", "renter", "owner")


class BookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Renter-facing bookings: create, list my rentals, view, cancel."""

    serializer_class = BookingSerializer
    permission_classes = [IsAuthenticated, RoleGate]
    gate_rules = {
        "create": (Resource.BOOKING, Action.CREATE),
        "cancel": (Resource.BOOKING, Action.UPDATE),
    }
    filterset_fields = ["status"]
    ordering_fields = ["created_at", "start_date"]

    def get_queryset(self):
        return _booking_queryset().filter(renter=self.request.user)

    def get_object(self):
        booking = _booking_queryset().filter(pk=self.kwargs["pk"]).first()
        if booking is None:
            raise NotFound("Booking not found.")
        user = self.request.user
        if user.pk not in (booking.renter_id, booking.owner_id) and not user.is_admin:
            raise NotOwned()
        return booking

    def create(self, request, *args, **kwargs):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = lifecycle.create_booking(
            renter=request.user,
            game_id=data["game_id"],
            start=data["start_date"],
            end=data["end_date"],
            notes=data["notes"],
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["patch"], url_path="cancel")
    def cancel(self, request, pk=None):
        booking = lifecycle.cancel_booking(renter=request.user, booking=self.get_object())
        return Response(BookingSerializer(booking).data)


class OwnerBookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Bookings of a partner's listings; the owner confirms handover and return."""

    serializer_class = BookingSerializer
    permission_classes = [IsAuthenticated, RoleGate]
    gate_rules = {"*": (Resource.CATALOG, Action.UPDATE)}
    filterset_fields = ["status", "game"]
    ordering_fields = ["created_at", "start_date"]

    def get_queryset(self):
        return _booking_queryset().filter(owner=self.request.user)

    def get_object(self):
        booking = _booking_queryset().filter(pk=self.kwargs["pk"]).first()
        if booking is None:
            raise NotFound("Booking not found.")
        return booking

    @action(detail=True, methods=["post"], url_path="handover")
    def handover(self, request, pk=None):
        booking = lifecycle.confirm_handover(owner=request.user, booking=self.get_object())
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"], url_path="return")
    def mark_returned(self, request, pk=None):
        booking = lifecycle.confirm_return(owner=request.user, booking=self.get_object())
        return Response(BookingSerializer(booking).data)


class AdminBookingViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = BookingSerializer
    permission_classes = [IsAuthenticated, RoleGate]
    gate_rules = {"*": (Resource.BOOKING, Action.MANAGE)}
    filterset_fields = ["status", "game", "renter", "owner"]
    search_fields = ["game__name", "renter__email"]
    ordering_fields = ["created_at", "start_date", "total_amount"]

    def get_queryset(self):
        return _booking_queryset()

    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request, pk=None):
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = lifecycle.admin_update_status(
            admin=request.user,
            booking=self.get_object(),
            status=serializer.validated_data["status"],
        )
        return Response(BookingSerializer(booking).data)
