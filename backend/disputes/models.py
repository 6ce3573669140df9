from django.conf import settings
from django.db import models


class Dispute(models.Model):
    TYPE_PAYMENT = "payment"
    TYPE_ITEM_CONDITION = "item_condition"
    TYPE_LATE_RETURN = "late_return"
    TYPE_NO_SHOW = "no_show"
    TYPE_OTHER = "other"
    TYPES = [
        (TYPE_PAYMENT, "Payment"),
        (TYPE_ITEM_CONDITION, "Item condition"),
        (TYPE_LATE_RETURN, "Late return"),
        (TYPE_NO_SHOW, "No show"),
        (TYPE_OTHER, "Other"),
    ]

    OPEN = "open"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    CLOSED = "closed"
    STATUSES = [
        (OPEN, "Open"),
        (INVESTIGATING, "Investigating"),
        (RESOLVED, "Resolved"),
        (CLOSED, "Closed"),
    ]

    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.PROTECT,
        related_name="disputes",
    )
    reporter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="reported_disputes",
    )
    dispute_type = models.CharField(max_length=20, choices=TYPES)
    title = models.CharField(max_length=200)
    description = models.TextField()
    status = models.CharField(max_length=20, choices=STATUSES, default=OPEN)
    resolution = models.TextField(blank=True)
    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="handled_disputes",
    )
    resolved_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.title} ({self.status})"
