import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("rental_days", models.PositiveIntegerField()),
                ("daily_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("total_rent", models.DecimalField(decimal_places=2, max_digits=12)),
                ("deposit", models.DecimalField(decimal_places=2, max_digits=12)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("status", models.CharField(choices=[("pending_payment", "Pending payment"), ("confirmed", "Confirmed"), ("active", "Active"), ("completed", "Completed"), ("cancelled", "Cancelled")], default="pending_payment", max_length=20)),
                ("notes", models.TextField(blank=True)),
                ("handover_at", models.DateTimeField(blank=True, null=True)),
                ("return_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("game", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="bookings", to="catalog.game")),
                ("owner", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="owned_bookings", to=settings.AUTH_USER_MODEL)),
                ("renter", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="rentals", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["status"], name="bookings_status_idx"),
                    models.Index(fields=["renter", "status"], name="bookings_renter_status_idx"),
                ],
            },
        ),
    ]
