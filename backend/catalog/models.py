from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q


class Category(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self):
        return self.name


class Game(models.Model):
    """A rentable game or console listing owned by a partner."""

    APPROVAL_PENDING = "pending_approval"
    APPROVAL_APPROVED = "approved"
    APPROVAL_REJECTED = "rejected"
    APPROVAL_STATUSES = [
        (APPROVAL_PENDING, "Pending approval"),
        (APPROVAL_APPROVED, "Approved"),
        (APPROVAL_REJECTED, "Rejected"),
    ]

    CONDITION_EXCELLENT = "excellent"
    CONDITION_GOOD = "good"
    CONDITION_FAIR = "fair"
    CONDITIONS = [
        (CONDITION_EXCELLENT, "Excellent"),
        (CONDITION_GOOD, "Good"),
        (CONDITION_FAIR, "Fair"),
    ]

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="games",
    )
    category = models.ForeignKey(
        "Category",
        on_delete=models.PROTECT,
        related_name="games",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    platform = models.CharField(max_length=100, blank=True)
    condition = models.CharField(max_length=20, choices=CONDITIONS, default=CONDITION_EXCELLENT)
    stock = models.PositiveIntegerField(default=1)
    available_stock = models.PositiveIntegerField(default=1)
    price_per_day = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(0)]
    )
    deposit = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    approval_status = models.CharField(
        max_length=20, choices=APPROVAL_STATUSES, default=APPROVAL_PENDING
    )
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="approved_games",
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True)
    is_active = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(available_stock__lte=F("stock")),
                name="game_available_stock_within_total",
            ),
        ]

    def __str__(self):
        return self.name

    @property
    def is_bookable(self) -> bool:
        return self.approval_status == self.APPROVAL_APPROVED and self.is_active


class GameImage(models.Model):
    game = models.ForeignKey("Game", on_delete=models.CASCADE, related_name="images")
    image = models.ImageField(upload_to="game-images/")
    position = models.PositiveSmallIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["position", "id"]

    def __str__(self):
        return f"{self.game.name} image #{self.position}"
