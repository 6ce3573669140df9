from django.conf import settings
from django.db import models


class PartnerApplication(models.Model):
    """A customer's request to start listing games as a partner."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    STATUSES = [
        (PENDING, "Pending"),
        (APPROVED, "Approved"),
        (REJECTED, "Rejected"),
    ]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="partner_application",
    )
    business_name = models.CharField(max_length=255)
    business_address = models.TextField()
    business_phone = models.CharField(max_length=20)
    business_description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUSES, default=PENDING)
    rejection_reason = models.TextField(blank=True)
    submitted_at = models.DateTimeField(auto_now_add=True)
    decided_at = models.DateTimeField(null=True, blank=True)
    decided_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="decided_partner_applications",
    )

    class Meta:
        ordering = ["-submitted_at", "-id"]

    def __str__(self):
        return f"{self.business_name} ({self.status})"
