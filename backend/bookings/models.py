from django.conf import settings
from django.db import models


class Booking(models.Model):
    """A rental of one unit of a game for an inclusive date range."""

    PENDING_PAYMENT = "pending_payment"
    CONFIRMED = "confirmed"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    STATUSES = [
        (PENDING_PAYMENT, "Pending payment"),
        (CONFIRMED, "Confirmed"),
        (ACTIVE, "Active"),
        (COMPLETED, "Completed"),
        (CANCELLED, "Cancelled"),
    ]
    TERMINAL_STATUSES = frozenset({COMPLETED, CANCELLED})

    renter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="rentals",
    )
    game = models.ForeignKey(
        "catalog.Game",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="owned_bookings",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    rental_days = models.PositiveIntegerField()
    daily_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_rent = models.DecimalField(max_digits=12, decimal_places=2)
    deposit = models.DecimalField(max_digits=12, decimal_places=2)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUSES, default=PENDING_PAYMENT)
    notes = models.TextField(blank=True)
    handover_at = models.DateTimeField(null=True, blank=True)
    return_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="bookings_status_idx"),
            models.Index(fields=["renter", "status"], name="bookings_renter_status_idx"),
        ]

    def __str__(self):
        return f"Booking #{self.pk} {self.game} ({self.status})"

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES
