import logging

from django.db import transaction

from accounts.permissions import Action, Resource, ensure_can_manage, ensure_owner
from bookings.models import Booking
from core.exceptions import DuplicateRecord, NotFound, RuleViolation

from .models import Review

logger = logging.getLogger(__name__)


@transaction.atomic
def create_review(*, reviewer, booking_id: int, rating: int, comment: str = "") -> Review:
    ensure_can_manage(reviewer, Resource.REVIEW, Action.CREATE)
    booking = Booking.objects.select_for_update(of=("self",)).filter(pk=booking_id).first()
    if booking is None:
        raise NotFound("Booking not found.")
    ensure_owner(booking.renter_id, reviewer)
    if booking.status != Booking.COMPLETED:
        raise RuleViolation("Only completed bookings can be reviewed.")
    if Review.objects.filter(booking=booking).exists():
        raise DuplicateRecord("This booking has already been reviewed.")

    review = Review.objects.create(
        booking=booking,
        reviewer=reviewer,
        game_id=booking.game_id,
        rating=rating,
        comment=comment,
    )
    logger.info("Review %s left on game %s by %s", review.pk, booking.game_id, reviewer.pk)
    return review
