import logging

import stripe
from django.conf import settings
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import Action, Resource, RoleGate, ensure_owner
from bookings.models import Booking
from core.exceptions import NotFound, PaymentNotFound, UnknownPaymentStatus

from .models import Payment
from .serializers import PaymentAdminSerializer, PaymentCreateSerializer, PaymentSerializer
from .services import checkout, outcomes

logger = logging.getLogger(__name__)


class BookingPaymentsView(APIView):
    """Start a payment for one of my bookings, or list its payment attempts."""

    permission_classes = [IsAuthenticated, RoleGate]
    gate_rules = {"post": (Resource.PAYMENT, Action.CREATE)}

    def _get_booking(self, booking_id) -> Booking:
        booking = Booking.objects.filter(pk=booking_id).first()
        if booking is None:
            raise NotFound("Booking not found.")
        ensure_owner(booking.renter_id, self.request.user)
        return booking

    def get(self, request, booking_id, *args, **kwargs):
        booking = self._get_booking(booking_id)
        serializer = PaymentSerializer(booking.payments.all(), many=True)
        return Response(serializer.data)

    def post(self, request, booking_id, *args, **kwargs):
        booking = self._get_booking(booking_id)
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = checkout.start_payment(
            renter=request.user,
            booking=booking,
            payment_type=serializer.validated_data["payment_type"],
        )
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


class AdminPaymentViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = PaymentAdminSerializer
    permission_classes = [IsAuthenticated, RoleGate]
    gate_rules = {"*": (Resource.PAYMENT, Action.MANAGE)}
    filterset_fields = ["status", "booking"]
    ordering_fields = ["created_at", "amount", "paid_at"]

    def get_queryset(self):
        return Payment.objects.select_related("booking")


class PaymentWebhookView(APIView):
    """Receive Stripe checkout and payment intent events."""

    permission_classes: list = []
    authentication_classes: list = []

    def post(self, request, *args, **kwargs):
        payload = request.body
        sig_header = request.META.get("HTTP_STRIPE_SIGNATURE")
        if not settings.STRIPE_WEBHOOK_SECRET:
            logger.error("Stripe webhook secret not configured.")
            return Response(status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        try:
            event = stripe.Webhook.construct_event(
                payload, sig_header, settings.STRIPE_WEBHOOK_SECRET
            )
        except ValueError:
            logger.warning("Invalid payload received on payment webhook.")
            return Response(status=status.HTTP_400_BAD_REQUEST)
        except stripe.SignatureVerificationError:
            logger.warning("Invalid Stripe signature on payment webhook.")
            return Response(status=status.HTTP_400_BAD_REQUEST)

        outcome = outcomes.outcome_from_event(event)
        if outcome is None:
            logger.debug("Ignoring Stripe event %s", event["type"])
            return Response(status=status.HTTP_200_OK)

        try:
            outcomes.apply_outcome(outcome)
        except PaymentNotFound:
            logger.warning(
                "Stripe event %s references unknown transaction %s",
                event["type"],
                outcome.provider_txn_id,
            )
        except UnknownPaymentStatus:
            logger.warning(
                "Stripe event %s carries unknown status %s for %s",
                event["type"],
                outcome.status,
                outcome.provider_txn_id,
            )
        return Response(status=status.HTTP_200_OK)
