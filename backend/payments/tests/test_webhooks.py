import pytest
import stripe
from django.core import mail

from bookings.models import Booking
from bookings.services import lifecycle
from payments.models import Payment
from payments.services import outcomes
from payments.services.outcomes import PaymentOutcome

pytestmark = pytest.mark.django_db

WEBHOOK_URL = "/api/webhooks/payments/"


@pytest.fixture
def booking(customer, game, rental_dates):
    start, end = rental_dates
    return lifecycle.create_booking(renter=customer, game_id=game.pk, start=start, end=end)


@pytest.fixture
def payment(booking):
    return Payment.objects.create(
        booking=booking,
        amount=booking.total_amount,
        currency="idr",
        provider_txn_id="cs_test_abc",
        provider_payment_intent="pi_test_abc",
    )


def _session_event(event_type, session_id="cs_test_abc", **fields):
    session = {"id": session_id, "payment_method_types": ["card"]}
    session.update(fields)
    return {"type": event_type, "data": {"object": session}}


def _post_event(api_client, monkeypatch, event):
    monkeypatch.setattr(
        "payments.api.stripe.Webhook.construct_event",
        lambda payload, sig, secret: event,
    )
    return api_client.post(
        WEBHOOK_URL, data="{}", content_type="application/json", HTTP_STRIPE_SIGNATURE="sig"
    )


def test_paid_outcome_confirms_booking(payment, booking):
    outcomes.apply_outcome(PaymentOutcome(provider_txn_id="cs_test_abc", status="paid", payment_method="card"))

    payment.refresh_from_db()
    booking.refresh_from_db()
    assert payment.status == Payment.PAID
    assert payment.paid_at is not None
    assert payment.method == "card"
    assert booking.status == Booking.CONFIRMED


def test_lookup_by_payment_intent(payment, booking):
    outcomes.apply_outcome(PaymentOutcome(provider_txn_id="pi_test_abc", status="succeeded"))

    booking.refresh_from_db()
    assert booking.status == Booking.CONFIRMED


def test_failed_outcome_cancels_booking_and_restores_stock(payment, booking, game):
    outcomes.apply_outcome(
        PaymentOutcome(provider_txn_id="cs_test_abc", status="expired", failure_reason="Checkout session expired.")
    )

    payment.refresh_from_db()
    booking.refresh_from_db()
    game.refresh_from_db()
    assert payment.status == Payment.FAILED
    assert payment.failure_reason == "Checkout session expired."
    assert booking.status == Booking.CANCELLED
    assert game.available_stock == 1


def test_pending_outcome_changes_nothing(payment, booking):
    outcomes.apply_outcome(PaymentOutcome(provider_txn_id="cs_test_abc", status="unpaid"))

    payment.refresh_from_db()
    booking.refresh_from_db()
    assert payment.status == Payment.PENDING
    assert booking.status == Booking.PENDING_PAYMENT


def test_duplicate_paid_outcome_is_applied_once(payment, booking, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        outcomes.apply_outcome(PaymentOutcome(provider_txn_id="cs_test_abc", status="paid"))
    first_paid_at = Payment.objects.get(pk=payment.pk).paid_at
    sent = len(mail.outbox)

    with django_capture_on_commit_callbacks(execute=True):
        outcomes.apply_outcome(PaymentOutcome(provider_txn_id="cs_test_abc", status="paid"))

    payment.refresh_from_db()
    booking.refresh_from_db()
    assert payment.paid_at == first_paid_at
    assert booking.status == Booking.CONFIRMED
    assert len(mail.outbox) == sent


def test_failure_after_paid_is_ignored(payment, booking):
    outcomes.apply_outcome(PaymentOutcome(provider_txn_id="cs_test_abc", status="paid"))
    outcomes.apply_outcome(PaymentOutcome(provider_txn_id="cs_test_abc", status="failed"))

    payment.refresh_from_db()
    booking.refresh_from_db()
    assert payment.status == Payment.PAID
    assert booking.status == Booking.CONFIRMED


def test_paid_after_renter_cancelled_keeps_payment_record(payment, booking, customer, caplog):
    lifecycle.cancel_booking(renter=customer, booking=booking)

    outcomes.apply_outcome(PaymentOutcome(provider_txn_id="cs_test_abc", status="paid"))

    payment.refresh_from_db()
    booking.refresh_from_db()
    assert payment.status == Payment.PAID
    assert booking.status == Booking.CANCELLED
    assert "could not follow" in caplog.text


def test_unknown_status_is_rejected(payment):
    with pytest.raises(outcomes.UnknownPaymentStatus):
        outcomes.apply_outcome(PaymentOutcome(provider_txn_id="cs_test_abc", status="mystery"))


def test_unknown_transaction_is_not_found(payment):
    with pytest.raises(outcomes.PaymentNotFound):
        outcomes.apply_outcome(PaymentOutcome(provider_txn_id="cs_missing", status="paid"))


def test_event_normalization():
    completed = outcomes.outcome_from_event(
        _session_event("checkout.session.completed", payment_status="paid", payment_intent="pi_1")
    )
    assert completed.status == "paid"
    assert completed.provider_payment_intent == "pi_1"

    failed_intent = outcomes.outcome_from_event(
        {
            "type": "payment_intent.payment_failed",
            "data": {"object": {"id": "pi_1", "last_payment_error": {"message": "Card declined"}}},
        }
    )
    assert failed_intent.provider_txn_id == "pi_1"
    assert failed_intent.failure_reason == "Card declined"

    assert outcomes.outcome_from_event(_session_event("customer.created")) is None


def test_webhook_completes_payment(api_client, monkeypatch, payment, booking):
    event = _session_event("checkout.session.completed", payment_status="paid")

    response = _post_event(api_client, monkeypatch, event)

    assert response.status_code == 200
    booking.refresh_from_db()
    assert booking.status == Booking.CONFIRMED


def test_webhook_duplicate_delivery_is_idempotent(api_client, monkeypatch, payment, booking, game):
    event = _session_event("checkout.session.completed", payment_status="paid")

    assert _post_event(api_client, monkeypatch, event).status_code == 200
    assert _post_event(api_client, monkeypatch, event).status_code == 200

    booking.refresh_from_db()
    game.refresh_from_db()
    assert booking.status == Booking.CONFIRMED
    assert game.available_stock == 0


def test_webhook_unknown_transaction_returns_200(api_client, monkeypatch, payment, caplog):
    event = _session_event("checkout.session.completed", session_id="cs_unknown", payment_status="paid")

    response = _post_event(api_client, monkeypatch, event)

    assert response.status_code == 200
    assert "unknown transaction cs_unknown" in caplog.text


def test_webhook_unknown_status_returns_200(api_client, monkeypatch, payment):
    event = _session_event("checkout.session.completed", payment_status="mystery")

    response = _post_event(api_client, monkeypatch, event)

    assert response.status_code == 200
    payment.refresh_from_db()
    assert payment.status == Payment.PENDING


def test_webhook_rejects_bad_signature(api_client, monkeypatch, payment):
    def raise_signature(payload, sig, secret):
        raise stripe.SignatureVerificationError("bad signature", sig)

    monkeypatch.setattr("payments.api.stripe.Webhook.construct_event", raise_signature)

    response = api_client.post(
        WEBHOOK_URL, data="{}", content_type="application/json", HTTP_STRIPE_SIGNATURE="forged"
    )

    assert response.status_code == 400
    payment.refresh_from_db()
    assert payment.status == Payment.PENDING


def test_webhook_rejects_unparsable_payload(api_client, monkeypatch):
    def raise_value_error(payload, sig, secret):
        raise ValueError("bad json")

    monkeypatch.setattr("payments.api.stripe.Webhook.construct_event", raise_value_error)

    response = api_client.post(
        WEBHOOK_URL, data="not-json", content_type="application/json", HTTP_STRIPE_SIGNATURE="sig"
    )

    assert response.status_code == 400
