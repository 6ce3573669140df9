"""
Translate Stripe webhook events into payment and booking transitions.

The webhook view verifies the signature, ``outcome_from_event`` normalizes
the event into a ``PaymentOutcome`` and ``apply_outcome`` records it. A
payment that is already paid or failed is left alone so redelivered events
are harmless.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from bookings import tasks
from bookings.services import lifecycle
from core.exceptions import InvalidTransition, PaymentNotFound, UnknownPaymentStatus
from payments.models import Payment

logger = logging.getLogger(__name__)

# Stripe checkout session and payment intent vocabulary.
STATUS_MAP = {
    "paid": Payment.PAID,
    "succeeded": Payment.PAID,
    "no_payment_required": Payment.PAID,
    "unpaid": Payment.PENDING,
    "open": Payment.PENDING,
    "processing": Payment.PENDING,
    "requires_action": Payment.PENDING,
    "failed": Payment.FAILED,
    "expired": Payment.FAILED,
    "canceled": Payment.FAILED,
    "requires_payment_method": Payment.FAILED,
}


@dataclass
class PaymentOutcome:
    provider_txn_id: str
    status: str
    payment_method: str = ""
    failure_reason: str = ""
    provider_payment_intent: str = ""


def _first_method(obj) -> str:
    methods = obj.get("payment_method_types") or []
    return methods[0] if methods else ""


def outcome_from_event(event) -> Optional[PaymentOutcome]:
    """Return the outcome carried by ``event`` or None for event types we ignore."""

    event_type = event["type"]
    obj = event["data"]["object"]

    if event_type in ("checkout.session.completed", "checkout.session.async_payment_succeeded"):
        return PaymentOutcome(
            provider_txn_id=obj["id"],
            status=obj.get("payment_status") or "",
            payment_method=_first_method(obj),
            provider_payment_intent=obj.get("payment_intent") or "",
        )
    if event_type == "checkout.session.async_payment_failed":
        return PaymentOutcome(
            provider_txn_id=obj["id"],
            status="failed",
            payment_method=_first_method(obj),
            failure_reason="Asynchronous payment failed.",
        )
    if event_type == "checkout.session.expired":
        return PaymentOutcome(
            provider_txn_id=obj["id"],
            status="expired",
            failure_reason="Checkout session expired.",
        )
    if event_type == "payment_intent.succeeded":
        return PaymentOutcome(
            provider_txn_id=obj["id"],
            status=obj.get("status") or "succeeded",
            payment_method=_first_method(obj),
        )
    if event_type == "payment_intent.payment_failed":
        error = obj.get("last_payment_error") or {}
        return PaymentOutcome(
            provider_txn_id=obj["id"],
            status="failed",
            payment_method=_first_method(obj),
            failure_reason=error.get("message") or "Payment failed.",
        )
    return None


@transaction.atomic
def apply_outcome(outcome: PaymentOutcome) -> Payment:
    txn_id = outcome.provider_txn_id
    payment = None
    if txn_id:
        payment = (
            Payment.objects.select_for_update()
            .filter(Q(provider_txn_id=txn_id) | Q(provider_payment_intent=txn_id))
            .first()
        )
    if payment is None:
        raise PaymentNotFound()

    target = STATUS_MAP.get(outcome.status)
    if target is None:
        raise UnknownPaymentStatus(f"Unknown transaction status '{outcome.status}'.")

    if payment.is_settled:
        logger.info(
            "Payment %s already %s, ignoring %s outcome", payment.pk, payment.status, outcome.status
        )
        return payment

    if outcome.provider_payment_intent and not payment.provider_payment_intent:
        payment.provider_payment_intent = outcome.provider_payment_intent
        payment.save(update_fields=["provider_payment_intent", "updated_at"])

    if target == Payment.PENDING:
        return payment

    now = timezone.now()
    if target == Payment.PAID:
        payment.status = Payment.PAID
        payment.paid_at = now
        payment.method = outcome.payment_method or payment.method
        payment.save(update_fields=["status", "paid_at", "method", "updated_at"])
        logger.info("Payment %s paid for booking %s", payment.pk, payment.booking_id)
        tasks.queue_notification(payment.booking, tasks.PAYMENT_CONFIRMED, payment=payment)
        transition = lifecycle.confirm_payment
    else:
        payment.status = Payment.FAILED
        payment.failed_at = now
        payment.failure_reason = outcome.failure_reason
        payment.save(update_fields=["status", "failed_at", "failure_reason", "updated_at"])
        logger.info("Payment %s failed for booking %s", payment.pk, payment.booking_id)
        transition = lifecycle.fail_payment

    try:
        transition(payment.booking)
    except InvalidTransition as exc:
        logger.warning(
            "Payment %s recorded as %s but booking %s could not follow: %s",
            payment.pk,
            payment.status,
            payment.booking_id,
            exc.detail,
        )
    return payment
