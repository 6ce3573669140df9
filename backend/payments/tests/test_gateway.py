import types
from decimal import Decimal

import pytest
import stripe

from bookings.services import lifecycle
from core.exceptions import PaymentGatewayError
from payments.models import Payment
from payments.services import gateway

pytestmark = pytest.mark.django_db


@pytest.fixture
def payment(customer, game, rental_dates):
    start, end = rental_dates
    booking = lifecycle.create_booking(renter=customer, game_id=game.pk, start=start, end=end)
    return Payment.objects.create(booking=booking, amount=booking.total_amount, currency="idr")


def test_minor_units():
    assert gateway.to_minor_units(Decimal("35000.00"), "idr") == 3500000
    assert gateway.to_minor_units(Decimal("1500"), "jpy") == 1500
    assert gateway.to_minor_units(Decimal("10.005"), "usd") == 1001


def test_stub_returns_preview_url(settings, payment):
    settings.STRIPE_USE_STUB = True
    settings.FRONTEND_URL = "https://app.test"

    session = gateway.create_charge(payment, "card")

    assert isinstance(session, gateway.CheckoutSessionStub)
    assert session.payment_status == "unpaid"
    assert session.id.startswith("cs_test_")
    assert session.payment_intent.startswith("pi_test_")
    assert session.url.startswith("https://app.test/payments/preview?")
    assert f"booking={payment.booking_id}" in session.url


def test_uses_stripe_when_configured(monkeypatch, settings, payment):
    settings.STRIPE_USE_STUB = False
    settings.STRIPE_SECRET_KEY = "sk_test_123"
    settings.FRONTEND_URL = "https://app.test"

    captured = {}
    original_api_key = stripe.api_key

    def fake_create(**kwargs):
        captured["kwargs"] = kwargs
        return types.SimpleNamespace(
            id="cs_real_123",
            payment_intent=None,
            payment_status="unpaid",
            url="https://stripe.test/checkout/cs_real_123",
        )

    monkeypatch.setattr(stripe.checkout.Session, "create", staticmethod(fake_create))

    try:
        session = gateway.create_charge(payment, "card")
        assert session.id == "cs_real_123"
        assert stripe.api_key == "sk_test_123"
        kwargs = captured["kwargs"]
        assert kwargs["metadata"]["booking_id"] == payment.booking_id
        assert kwargs["line_items"][0]["price_data"]["currency"] == "idr"
        assert kwargs["line_items"][0]["price_data"]["unit_amount"] == gateway.to_minor_units(
            payment.amount, "idr"
        )
        assert kwargs["success_url"].endswith(f"?booking={payment.booking_id}")
    finally:
        stripe.api_key = original_api_key


def test_stripe_failure_becomes_gateway_error(monkeypatch, settings, payment, caplog):
    settings.STRIPE_USE_STUB = False
    settings.STRIPE_SECRET_KEY = "sk_test_123"
    original_api_key = stripe.api_key

    def failing_create(**kwargs):
        raise stripe.APIConnectionError("network down")

    monkeypatch.setattr(stripe.checkout.Session, "create", staticmethod(failing_create))

    try:
        with pytest.raises(PaymentGatewayError):
            gateway.create_charge(payment, "card")
    finally:
        stripe.api_key = original_api_key

    assert "Stripe checkout failed" in caplog.text
