from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from accounts.models import User
from bookings.models import Booking
from bookings.services import lifecycle
from catalog.models import Category, Game

SEED_PASSWORD = "Respawn123!"
SUPERUSER_EMAIL = "root@respawn.test"
SUPERUSER_PASSWORD = "AdminRespawn123!"

CATEGORIES = [
    ("Console", "Home and handheld consoles"),
    ("Board Game", "Tabletop and party games"),
    ("VR", "Virtual reality headsets and accessories"),
]

GAMES = [
    # name, category, platform, stock, price/day, deposit
    ("PlayStation 5 Digital", "Console", "PS5", 3, "75000", "500000"),
    ("Nintendo Switch OLED", "Console", "Switch", 2, "50000", "300000"),
    ("Catan", "Board Game", "Tabletop", 4, "15000", "50000"),
    ("Meta Quest 3", "VR", "Quest", 1, "90000", "750000"),
]


class Command(BaseCommand):
    help = "Populate the local development database with sample data."

    def handle(self, *args, **options):
        if not settings.DEBUG:
            raise CommandError("Refusing to seed data while DEBUG is False.")

        with transaction.atomic():
            self.stdout.write(self.style.MIGRATE_HEADING("Creating users"))
            self._ensure_superuser()
            admin = self._ensure_user("admin@respawn.test", "Ayu Admin", User.ADMIN)
            partner = self._ensure_user("partner@respawn.test", "Pandu Partner", User.PARTNER)
            customer = self._ensure_user("customer@respawn.test", "Citra Customer", User.CUSTOMER)

            self.stdout.write(self.style.MIGRATE_HEADING("Creating catalog"))
            categories = {
                name: Category.objects.get_or_create(name=name, defaults={"description": description})[0]
                for name, description in CATEGORIES
            }
            games = [
                self._ensure_game(partner, admin, categories[category], name, platform, stock, price, deposit)
                for name, category, platform, stock, price, deposit in GAMES
            ]

            self.stdout.write(self.style.MIGRATE_HEADING("Creating sample booking"))
            if not Booking.objects.filter(renter=customer).exists():
                start = timezone.localdate() + timedelta(days=2)
                booking = lifecycle.create_booking(
                    renter=customer,
                    game_id=games[0].pk,
                    start=start,
                    end=start + timedelta(days=2),
                    notes="Seeded booking",
                )
                self.stdout.write(self.style.NOTICE(f"Booking #{booking.pk} awaiting payment"))

        self.stdout.write(self.style.SUCCESS("Development seed data created."))
        self.stdout.write(self.style.NOTICE(f"Sample login accounts use password: {SEED_PASSWORD}"))
        self.stdout.write(self.style.NOTICE(f"Admin superuser {SUPERUSER_EMAIL} password: {SUPERUSER_PASSWORD}"))

    def _ensure_user(self, email: str, full_name: str, role: str) -> User:
        user, created = User.objects.get_or_create(
            email=email,
            defaults={"username": email, "full_name": full_name, "role": role},
        )
        if created:
            user.set_password(SEED_PASSWORD)
            user.save()
        elif user.role != role:
            user.role = role
            user.save(update_fields=["role"])
        return user

    def _ensure_game(self, partner, admin, category, name, platform, stock, price, deposit) -> Game:
        game, created = Game.objects.get_or_create(
            owner=partner,
            name=name,
            defaults={
                "category": category,
                "platform": platform,
                "stock": stock,
                "available_stock": stock,
                "price_per_day": Decimal(price),
                "deposit": Decimal(deposit),
                "approval_status": Game.APPROVAL_APPROVED,
                "approved_by": admin,
                "approved_at": timezone.now(),
                "is_active": True,
            },
        )
        if created:
            self.stdout.write(self.style.NOTICE(f"Listed {name} ({stock} units)"))
        return game

    def _ensure_superuser(self) -> User:
        user, created = User.objects.get_or_create(
            email=SUPERUSER_EMAIL,
            defaults={
                "username": SUPERUSER_EMAIL,
                "full_name": "Respawn Root",
                "role": User.SUPER_ADMIN,
                "is_staff": True,
                "is_superuser": True,
            },
        )
        if created or not user.has_usable_password():
            user.set_password(SUPERUSER_PASSWORD)
            user.save(update_fields=["password"])
        return user
