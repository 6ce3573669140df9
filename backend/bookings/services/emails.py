from __future__ import annotations

from django.conf import settings
from django.core.mail import send_mail
from django.utils.html import escape

from bookings.models import Booking


def _display_name(user) -> str:
    return user.full_name or user.email


def _money(amount) -> str:
    return f"{settings.PAYMENT_CURRENCY.upper()} {amount:,.2f}"


def _booking_url(booking: Booking) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/bookings/{booking.id}"


def _send(*, subject: str, lines: list[str], recipient: str):
    text_body = "\n".join(lines)
    html_body = "".join(f"<p>{escape(line)}</p>" if line else "" for line in lines)
    send_mail(
        subject,
        text_body,
        settings.DEFAULT_FROM_EMAIL,
        [recipient],
        html_message=html_body,
        fail_silently=False,
    )


def send_booking_confirmation_email(booking: Booking):
    lines = [
        f"Hi {_display_name(booking.renter)},",
        "",
        f"Your booking for {booking.game.name} has been created.",
        f"Rental period: {booking.start_date:%B %d, %Y} to {booking.end_date:%B %d, %Y} "
        f"({booking.rental_days} days).",
        f"Rent: {_money(booking.total_rent)}",
        f"Deposit: {_money(booking.deposit)}",
        f"Total due: {_money(booking.total_amount)}",
        "",
        f"Complete the payment to confirm your rental: {_booking_url(booking)}",
        "",
        "The Respawn Team",
    ]
    _send(
        subject=f"Booking #{booking.id} created",
        lines=lines,
        recipient=booking.renter.email,
    )


def send_status_update_email(booking: Booking):
    lines = [
        f"Hi {_display_name(booking.renter)},",
        "",
        f"Your booking for {booking.game.name} is now {booking.get_status_display().lower()}.",
        f"Booking details: {_booking_url(booking)}",
        "",
        "The Respawn Team",
    ]
    _send(
        subject=f"Booking #{booking.id} status update",
        lines=lines,
        recipient=booking.renter.email,
    )


def send_payment_instruction_email(booking: Booking, payment):
    lines = [
        f"Hi {_display_name(booking.renter)},",
        "",
        f"Please complete the payment of {_money(payment.amount)} for {booking.game.name}.",
        f"Pay here: {payment.redirect_url}",
        "",
        "Unpaid bookings are cancelled when the payment session expires.",
        "",
        "The Respawn Team",
    ]
    _send(
        subject=f"Payment instructions for booking #{booking.id}",
        lines=lines,
        recipient=booking.renter.email,
    )


def send_payment_confirmed_email(booking: Booking, payment):
    lines = [
        f"Hi {_display_name(booking.renter)},",
        "",
        f"We received your payment of {_money(payment.amount)}.",
        f"Your rental of {booking.game.name} starting {booking.start_date:%B %d, %Y} is confirmed.",
        f"Booking details: {_booking_url(booking)}",
        "",
        "The Respawn Team",
    ]
    _send(
        subject=f"Payment received for booking #{booking.id}",
        lines=lines,
        recipient=booking.renter.email,
    )
