"""
Booking state machine.

    pending_payment -> confirmed -> active -> completed
    pending_payment | confirmed -> cancelled

Every transition locks the booking row for the length of the transaction.
Moving into ``cancelled`` or ``completed`` hands the unit back to the
inventory ledger in that same transaction.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from accounts.permissions import Action, Resource, ensure_can_manage, ensure_owner
from bookings import tasks
from bookings.models import Booking
from catalog import inventory
from catalog.models import Game
from core.exceptions import (
    CannotCancelInCurrentState,
    GameUnavailable,
    InvalidDateRange,
    InvalidTransition,
    NotFound,
    NotInPendingPaymentState,
)

logger = logging.getLogger(__name__)

TRANSITIONS = {
    Booking.PENDING_PAYMENT: {Booking.CONFIRMED, Booking.CANCELLED},
    Booking.CONFIRMED: {Booking.ACTIVE, Booking.CANCELLED},
    Booking.ACTIVE: {Booking.COMPLETED},
    Booking.COMPLETED: set(),
    Booking.CANCELLED: set(),
}

CANCELLABLE = {Booking.PENDING_PAYMENT, Booking.CONFIRMED}

# Statuses that no longer hold a unit of stock.
RELEASING = {Booking.CANCELLED, Booking.COMPLETED}


def calculate_pricing(*, start: date, end: date, price_per_day: Decimal, deposit: Decimal) -> dict:
    rental_days = (end - start).days + 1
    total_rent = price_per_day * rental_days
    return {
        "rental_days": rental_days,
        "daily_price": price_per_day,
        "total_rent": total_rent,
        "deposit": deposit,
        "total_amount": total_rent + deposit,
    }


def _lock(booking_id: int) -> Booking:
    return Booking.objects.select_for_update(of=("self",)).select_related("game").get(pk=booking_id)


def _apply(booking: Booking, target: str) -> Booking:
    previous = booking.status
    booking.status = target
    update_fields = ["status", "updated_at"]
    now = timezone.now()
    if target == Booking.ACTIVE:
        booking.handover_at = now
        update_fields.append("handover_at")
    elif target == Booking.COMPLETED:
        booking.return_at = now
        update_fields.append("return_at")
    booking.save(update_fields=update_fields)

    if target in RELEASING:
        inventory.release(booking.game_id)

    logger.info("Booking %s moved %s -> %s", booking.pk, previous, target)
    tasks.queue_notification(booking, tasks.STATUS_CHANGED)
    return booking


@transaction.atomic
def create_booking(*, renter, game_id: int, start: date, end: date, notes: str = "") -> Booking:
    ensure_can_manage(renter, Resource.BOOKING, Action.CREATE)
    if start > end:
        raise InvalidDateRange("End date must not be before start date.")
    if start < timezone.localdate():
        raise InvalidDateRange("Start date cannot be in the past.")
    game = Game.objects.filter(pk=game_id).first()
    if game is None:
        raise NotFound("Game not found.")
    if not game.is_bookable:
        raise GameUnavailable()

    inventory.reserve(game.pk)

    booking = Booking.objects.create(
        renter=renter,
        game=game,
        owner_id=game.owner_id,
        start_date=start,
        end_date=end,
        status=Booking.PENDING_PAYMENT,
        notes=notes,
        **calculate_pricing(
            start=start, end=end, price_per_day=game.price_per_day, deposit=game.deposit
        ),
    )
    logger.info("Booking %s created for game %s by renter %s", booking.pk, game.pk, renter.pk)
    tasks.queue_notification(booking, tasks.BOOKING_CREATED)
    return booking


@transaction.atomic
def cancel_booking(*, renter, booking: Booking) -> Booking:
    ensure_owner(booking.renter_id, renter)
    booking = _lock(booking.pk)
    if booking.status not in CANCELLABLE:
        raise CannotCancelInCurrentState()
    return _apply(booking, Booking.CANCELLED)


@transaction.atomic
def confirm_handover(*, owner, booking: Booking) -> Booking:
    ensure_owner(booking.owner_id, owner)
    booking = _lock(booking.pk)
    if booking.status != Booking.CONFIRMED:
        raise InvalidTransition("Only confirmed bookings can be handed over.")
    return _apply(booking, Booking.ACTIVE)


@transaction.atomic
def confirm_return(*, owner, booking: Booking) -> Booking:
    ensure_owner(booking.owner_id, owner)
    booking = _lock(booking.pk)
    if booking.status != Booking.ACTIVE:
        raise InvalidTransition("Only active bookings can be returned.")
    return _apply(booking, Booking.COMPLETED)


@transaction.atomic
def confirm_payment(booking: Booking) -> Booking:
    booking = _lock(booking.pk)
    if booking.status != Booking.PENDING_PAYMENT:
        raise NotInPendingPaymentState()
    return _apply(booking, Booking.CONFIRMED)


@transaction.atomic
def fail_payment(booking: Booking) -> Booking:
    booking = _lock(booking.pk)
    if booking.is_terminal:
        raise InvalidTransition(f"Booking is already {booking.status}.")
    return _apply(booking, Booking.CANCELLED)


@transaction.atomic
def admin_update_status(*, admin, booking: Booking, status: str) -> Booking:
    ensure_can_manage(admin, Resource.BOOKING, Action.MANAGE)
    booking = _lock(booking.pk)
    if status not in TRANSITIONS[booking.status]:
        raise InvalidTransition(f"Cannot move booking from {booking.status} to {status}.")
    logger.info("Admin %s overriding booking %s status", admin.pk, booking.pk)
    return _apply(booking, status)
