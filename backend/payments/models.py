from django.db import models


class Payment(models.Model):
    PROVIDER_STRIPE = "stripe"
    PROVIDERS = [(PROVIDER_STRIPE, "Stripe")]

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"
    STATUSES = [
        (PENDING, "Pending"),
        (PAID, "Paid"),
        (FAILED, "Failed"),
        (REFUNDED, "Refunded"),
    ]
    SETTLED_STATUSES = frozenset({PAID, FAILED})

    TYPE_CARD = "card"
    PAYMENT_TYPES = [TYPE_CARD]

    booking = models.ForeignKey("bookings.Booking", on_delete=models.PROTECT, related_name="payments")
    provider = models.CharField(max_length=20, choices=PROVIDERS, default=PROVIDER_STRIPE)
    provider_txn_id = models.CharField(max_length=255, blank=True, db_index=True)
    provider_payment_intent = models.CharField(max_length=255, blank=True, db_index=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=10, default="idr")
    status = models.CharField(max_length=20, choices=STATUSES, default=PENDING)
    payment_type = models.CharField(max_length=30, default=TYPE_CARD)
    method = models.CharField(max_length=50, blank=True)
    redirect_url = models.URLField(max_length=1000, blank=True)
    failure_reason = models.TextField(blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    failed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"Payment #{self.pk} for booking #{self.booking_id} ({self.status})"

    @property
    def is_settled(self) -> bool:
        return self.status in self.SETTLED_STATUSES
