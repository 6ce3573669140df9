import logging
from datetime import timedelta

import pytest
from django.utils import timezone

from accounts.models import User
from accounts.permissions import Action, Resource, can_manage, ensure_owner
from bookings.services import lifecycle
from core.exceptions import NotOwned


@pytest.mark.parametrize(
    "role, resource, action, allowed",
    [
        (User.CUSTOMER, Resource.BOOKING, Action.CREATE, True),
        (User.CUSTOMER, Resource.CATALOG, Action.CREATE, False),
        (User.PARTNER, Resource.CATALOG, Action.CREATE, True),
        (User.PARTNER, Resource.CATALOG, Action.MANAGE, False),
        (User.ADMIN, Resource.CATALOG, Action.MANAGE, True),
        (User.ADMIN, Resource.CATEGORY, Action.MANAGE, True),
        (User.ADMIN, Resource.BOOKING, Action.MANAGE, True),
        (User.ADMIN, Resource.USER, Action.MANAGE, True),
        (User.ADMIN, Resource.USER, Action.DELETE, False),
        (User.ADMIN, Resource.ADMIN_ACCOUNT, Action.MANAGE, False),
        (User.SUPER_ADMIN, Resource.USER, Action.DELETE, True),
        (User.SUPER_ADMIN, Resource.ADMIN_ACCOUNT, Action.MANAGE, True),
        (User.SUPER_ADMIN, Resource.DISPUTE, Action.MANAGE, True),
    ],
)
def test_role_lattice(role, resource, action, allowed):
    assert can_manage(role, resource, action) is allowed


def test_unknown_pairs_and_roles_are_denied():
    assert can_manage(User.SUPER_ADMIN, Resource.REVIEW, Action.DELETE) is False
    assert can_manage("guest", Resource.BOOKING, Action.CREATE) is False
    assert can_manage(None, Resource.BOOKING, Action.CREATE) is False


@pytest.mark.django_db
def test_ensure_owner(customer, other_customer):
    ensure_owner(customer.pk, customer)

    with pytest.raises(NotOwned):
        ensure_owner(customer.pk, other_customer)


@pytest.mark.django_db
def test_denials_are_audited_with_distinct_codes(api_client, customer, partner, make_game, caplog):
    game = make_game(approval_status="pending_approval", is_active=False)
    api_client.force_authenticate(customer)

    with caplog.at_level(logging.WARNING, logger="respawn.audit"):
        role_denied = api_client.post(f"/api/admin/games/{game.pk}/approve/")

    assert role_denied.status_code == 403
    assert role_denied.json()["detail"] == "Insufficient permission."
    assert "code=insufficient_permission" in caplog.text
    caplog.clear()

    start = timezone.localdate() + timedelta(days=1)
    booking = lifecycle.create_booking(renter=customer, game_id=make_game().pk, start=start, end=start)
    api_client.force_authenticate(partner)
    with caplog.at_level(logging.WARNING, logger="respawn.audit"):
        ownership_denied = api_client.patch(f"/api/bookings/{booking.pk}/cancel/")

    assert ownership_denied.status_code == 403
    assert "code=not_owned" in caplog.text
