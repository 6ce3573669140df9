"""Celery tasks for booking notifications."""

from __future__ import annotations

import logging
from smtplib import SMTPException

from celery import shared_task
from django.db import transaction
from kombu.exceptions import OperationalError

from .models import Booking
from .services import emails

logger = logging.getLogger(__name__)

BOOKING_CREATED = "booking_created"
STATUS_CHANGED = "status_changed"
PAYMENT_INSTRUCTION = "payment_instruction"
PAYMENT_CONFIRMED = "payment_confirmed"


@shared_task(
    autoretry_for=(SMTPException, OSError),
    retry_backoff=True,
    retry_backoff_max=600,
    max_retries=5,
)
def send_booking_notification(booking_id: int, kind: str, payment_id: int | None = None) -> None:
    try:
        booking = Booking.objects.select_related("renter", "game").get(pk=booking_id)
    except Booking.DoesNotExist:
        logger.warning("Notification %s skipped, booking %s no longer exists", kind, booking_id)
        return

    if kind == BOOKING_CREATED:
        emails.send_booking_confirmation_email(booking)
    elif kind == STATUS_CHANGED:
        emails.send_status_update_email(booking)
    elif kind in (PAYMENT_INSTRUCTION, PAYMENT_CONFIRMED):
        payment = booking.payments.get(pk=payment_id)
        if kind == PAYMENT_INSTRUCTION:
            emails.send_payment_instruction_email(booking, payment)
        else:
            emails.send_payment_confirmed_email(booking, payment)
    else:
        logger.error("Unknown notification kind %s for booking %s", kind, booking_id)


def _enqueue(booking_id: int, kind: str, payment_id: int | None) -> None:
    try:
        send_booking_notification.delay(booking_id, kind, payment_id)
    except (OperationalError, OSError):
        logger.exception("Could not queue %s notification for booking %s", kind, booking_id)


def queue_notification(booking: Booking, kind: str, payment=None) -> None:
    """Dispatch a notification once the surrounding transaction commits."""

    payment_id = payment.pk if payment is not None else None
    transaction.on_commit(lambda: _enqueue(booking.pk, kind, payment_id))
