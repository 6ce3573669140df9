from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional
from uuid import uuid4

import stripe
from django.conf import settings

from core.exceptions import PaymentGatewayError
from payments.models import Payment

logger = logging.getLogger(__name__)

ZERO_DECIMAL_CURRENCIES = {"bif", "clp", "djf", "gnf", "jpy", "kmf", "krw", "mga", "pyg", "rwf", "ugx", "vnd", "vuv", "xaf", "xof", "xpf"}


@dataclass
class CheckoutSessionStub:
    """
    Stand-in for stripe.checkout.Session when running in stub mode.

    Tests and local development never hit Stripe; the stub returns predictable
    identifiers so payment records, emails and links behave as if Stripe had
    answered.
    """

    id: str
    payment_intent: str
    payment_status: str
    url: str


def to_minor_units(amount: Decimal, currency: str) -> int:
    if currency.lower() in ZERO_DECIMAL_CURRENCIES:
        return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def build_checkout_preview_url(*, payment: Payment, amount_minor: int, session_id: str) -> str:
    return (
        f"{settings.FRONTEND_URL.rstrip('/')}/payments/preview?"
        f"booking={payment.booking_id}&amount={amount_minor}&session={session_id}"
    )


def _stub_checkout_session(*, payment: Payment, amount_minor: int) -> CheckoutSessionStub:
    session_id = f"cs_test_{uuid4().hex}"
    return CheckoutSessionStub(
        id=session_id,
        payment_intent=f"pi_test_{uuid4().hex}",
        payment_status="unpaid",
        url=build_checkout_preview_url(
            payment=payment, amount_minor=amount_minor, session_id=session_id
        ),
    )


def _get_stripe_api_key() -> Optional[str]:
    key = getattr(settings, "STRIPE_SECRET_KEY", "")
    return key or None


def _should_use_stub() -> bool:
    if getattr(settings, "STRIPE_USE_STUB", False):
        return True
    return _get_stripe_api_key() is None


def create_charge(payment: Payment, payment_type: str = Payment.TYPE_CARD):
    """
    Open a Stripe Checkout session (or stub equivalent) for a payment.

    Returns an object exposing ``id``, ``payment_intent``, ``payment_status``
    and ``url``. Stripe failures are logged and raised as
    ``PaymentGatewayError``.
    """

    amount_minor = to_minor_units(payment.amount, payment.currency)
    if _should_use_stub():
        return _stub_checkout_session(payment=payment, amount_minor=amount_minor)

    stripe.api_key = _get_stripe_api_key()
    booking = payment.booking
    frontend = settings.FRONTEND_URL.rstrip("/")
    try:
        return stripe.checkout.Session.create(
            mode="payment",
            payment_method_types=[payment_type],
            line_items=[
                {
                    "quantity": 1,
                    "price_data": {
                        "currency": payment.currency,
                        "unit_amount": amount_minor,
                        "product_data": {
                            "name": f"{booking.game.name} rental ({booking.rental_days} days)",
                        },
                    },
                }
            ],
            success_url=f"{frontend}/payment/success?booking={booking.id}",
            cancel_url=f"{frontend}/payment/cancel?booking={booking.id}",
            customer_email=booking.renter.email,
            client_reference_id=str(payment.id),
            metadata={
                "booking_id": booking.id,
                "payment_id": payment.id,
            },
        )
    except stripe.StripeError as exc:
        logger.exception(
            "Stripe checkout failed for payment %s (booking %s)", payment.id, booking.id
        )
        raise PaymentGatewayError() from exc
