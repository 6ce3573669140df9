"""
Dispute handling.

A dispute is a moderation record attached to a booking; it never changes the
booking's own status.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from accounts.permissions import Action, Resource, ensure_can_manage
from bookings.models import Booking
from core.exceptions import AlreadyDecided, InvalidTransition, NotFound, NotOwned, RuleViolation

from .models import Dispute

logger = logging.getLogger(__name__)

DISPUTABLE_BOOKING_STATUSES = {Booking.CONFIRMED, Booking.ACTIVE, Booking.COMPLETED}


def create_dispute(*, reporter, booking_id: int, data: dict) -> Dispute:
    ensure_can_manage(reporter, Resource.DISPUTE, Action.CREATE)
    booking = Booking.objects.filter(pk=booking_id).first()
    if booking is None:
        raise NotFound("Booking not found.")
    if reporter.pk not in (booking.renter_id, booking.owner_id):
        raise NotOwned()
    if booking.status not in DISPUTABLE_BOOKING_STATUSES:
        raise RuleViolation("Disputes can only be opened for confirmed, active or completed bookings.")

    dispute = Dispute.objects.create(booking=booking, reporter=reporter, **data)
    logger.info("Dispute %s opened on booking %s by %s", dispute.pk, booking.pk, reporter.pk)
    return dispute


def _lock(dispute: Dispute) -> Dispute:
    return Dispute.objects.select_for_update().get(pk=dispute.pk)


@transaction.atomic
def investigate(*, admin, dispute: Dispute) -> Dispute:
    ensure_can_manage(admin, Resource.DISPUTE, Action.MANAGE)
    dispute = _lock(dispute)
    if dispute.status != Dispute.OPEN:
        raise InvalidTransition("Only open disputes can be investigated.")
    dispute.status = Dispute.INVESTIGATING
    dispute.save(update_fields=["status", "updated_at"])
    logger.info("Dispute %s under investigation by %s", dispute.pk, admin.pk)
    return dispute


@transaction.atomic
def resolve(*, admin, dispute: Dispute, resolution: str) -> Dispute:
    ensure_can_manage(admin, Resource.DISPUTE, Action.MANAGE)
    dispute = _lock(dispute)
    if dispute.status in (Dispute.RESOLVED, Dispute.CLOSED):
        raise AlreadyDecided("Dispute has already been resolved.")
    _settle(dispute, Dispute.RESOLVED, admin, resolution)
    return dispute


@transaction.atomic
def close(*, admin, dispute: Dispute, resolution: str = "") -> Dispute:
    ensure_can_manage(admin, Resource.DISPUTE, Action.MANAGE)
    dispute = _lock(dispute)
    if dispute.status == Dispute.CLOSED:
        raise AlreadyDecided("Dispute is already closed.")
    _settle(dispute, Dispute.CLOSED, admin, resolution or dispute.resolution)
    return dispute


def _settle(dispute: Dispute, status: str, admin, resolution: str) -> None:
    dispute.status = status
    dispute.resolution = resolution
    dispute.resolved_by = admin
    dispute.resolved_at = timezone.now()
    dispute.save(update_fields=["status", "resolution", "resolved_by", "resolved_at", "updated_at"])
    logger.info("Dispute %s %s by %s", dispute.pk, status, admin.pk)
