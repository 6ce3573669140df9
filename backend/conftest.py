from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from catalog.models import Category, Game

User = get_user_model()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_user(db):
    def _make_user(email, role=User.CUSTOMER, **extra):
        return User.objects.create_user(
            username=email,
            email=email,
            password="password123",
            full_name=extra.pop("full_name", email.split("@")[0].title()),
            role=role,
            **extra,
        )

    return _make_user


@pytest.fixture
def customer(make_user):
    return make_user("rina@example.com")


@pytest.fixture
def other_customer(make_user):
    return make_user("budi@example.com")


@pytest.fixture
def partner(make_user):
    return make_user("partner@example.com", role=User.PARTNER)


@pytest.fixture
def admin_user(make_user):
    return make_user("admin@example.com", role=User.ADMIN)


@pytest.fixture
def super_admin(make_user):
    return make_user("root@example.com", role=User.SUPER_ADMIN)


@pytest.fixture
def category(db):
    return Category.objects.create(name="Console")


@pytest.fixture
def make_game(partner, category):
    def _make_game(stock=1, price_per_day="50000", deposit="100000", **extra):
        defaults = {
            "owner": partner,
            "category": category,
            "name": "PlayStation 5",
            "platform": "PS5",
            "stock": stock,
            "available_stock": stock,
            "price_per_day": Decimal(price_per_day),
            "deposit": Decimal(deposit),
            "approval_status": Game.APPROVAL_APPROVED,
            "is_active": True,
        }
        defaults.update(extra)
        return Game.objects.create(**defaults)

    return _make_game


@pytest.fixture
def game(make_game):
    return make_game()


@pytest.fixture
def rental_dates():
    start = date.today() + timedelta(days=3)
    return start, start + timedelta(days=2)
