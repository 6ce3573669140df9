from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    CUSTOMER = "customer"
    PARTNER = "partner"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"
    ROLES = [
        (CUSTOMER, "Customer"),
        (PARTNER, "Partner"),
        (ADMIN, "Admin"),
        (SUPER_ADMIN, "Super admin"),
    ]

    full_name = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    address = models.TextField(blank=True)
    role = models.CharField(max_length=20, choices=ROLES, default=CUSTOMER)

    class Meta(AbstractUser.Meta):
        indexes = [models.Index(fields=["role"], name="accounts_user_role_idx")]

    def __str__(self):
        return self.full_name or self.email

    @property
    def is_admin(self) -> bool:
        return self.role in {self.ADMIN, self.SUPER_ADMIN}
