from __future__ import annotations

import logging

from django.conf import settings
from django.db import transaction

from accounts.permissions import Action, Resource, ensure_can_manage, ensure_owner
from bookings import tasks
from bookings.models import Booking
from core.exceptions import NotInPendingPaymentState, PaymentAlreadyExists
from payments.models import Payment

from . import gateway

logger = logging.getLogger(__name__)


@transaction.atomic
def start_payment(*, renter, booking: Booking, payment_type: str = Payment.TYPE_CARD) -> Payment:
    """Create a payment for a booking awaiting payment and open a checkout session."""

    ensure_can_manage(renter, Resource.PAYMENT, Action.CREATE)
    ensure_owner(booking.renter_id, renter)
    booking = Booking.objects.select_for_update(of=("self",)).select_related("game", "renter").get(
        pk=booking.pk
    )
    if booking.status != Booking.PENDING_PAYMENT:
        raise NotInPendingPaymentState()
    if booking.payments.filter(status__in=[Payment.PENDING, Payment.PAID]).exists():
        raise PaymentAlreadyExists()

    payment = Payment.objects.create(
        booking=booking,
        amount=booking.total_amount,
        currency=settings.PAYMENT_CURRENCY,
        payment_type=payment_type,
    )
    session = gateway.create_charge(payment, payment_type)
    payment.provider_txn_id = session.id
    payment.provider_payment_intent = session.payment_intent or ""
    payment.redirect_url = session.url or ""
    payment.save(
        update_fields=["provider_txn_id", "provider_payment_intent", "redirect_url", "updated_at"]
    )
    logger.info("Payment %s opened for booking %s (%s)", payment.pk, booking.pk, session.id)
    tasks.queue_notification(booking, tasks.PAYMENT_INSTRUCTION, payment=payment)
    return payment
