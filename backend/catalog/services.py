from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from accounts.permissions import Action, Resource, ensure_can_manage, ensure_owner
from core.exceptions import AlreadyDecided

from . import inventory
from .models import Game

logger = logging.getLogger(__name__)

PARTNER_EDITABLE_FIELDS = [
    "name",
    "description",
    "platform",
    "condition",
    "category",
    "price_per_day",
    "deposit",
]


def create_partner_game(*, partner, data: dict) -> Game:
    ensure_can_manage(partner, Resource.CATALOG, Action.CREATE)
    stock = data.get("stock", 1)
    game = Game.objects.create(
        owner=partner,
        approval_status=Game.APPROVAL_PENDING,
        is_active=False,
        stock=stock,
        available_stock=stock,
        **{field: data[field] for field in PARTNER_EDITABLE_FIELDS if field in data},
    )
    logger.info("Game %s listed by partner %s, awaiting approval", game.pk, partner.pk)
    return game


@transaction.atomic
def update_partner_game(*, partner, game: Game, data: dict) -> Game:
    ensure_can_manage(partner, Resource.CATALOG, Action.UPDATE)
    ensure_owner(game.owner_id, partner)
    if game.approval_status == Game.APPROVAL_APPROVED:
        raise AlreadyDecided("Approved listings can no longer be edited.")

    update_fields = ["updated_at"]
    for field in PARTNER_EDITABLE_FIELDS:
        if field in data:
            setattr(game, field, data[field])
            update_fields.append(field)

    if game.approval_status == Game.APPROVAL_REJECTED:
        game.approval_status = Game.APPROVAL_PENDING
        game.rejection_reason = ""
        update_fields += ["approval_status", "rejection_reason"]

    game.save(update_fields=update_fields)
    if "stock" in data and data["stock"] != game.stock:
        inventory.adjust_total_stock(game, data["stock"])
    return game


def approve_game(*, admin, game: Game) -> Game:
    ensure_can_manage(admin, Resource.CATALOG, Action.MANAGE)
    if game.approval_status != Game.APPROVAL_PENDING:
        raise AlreadyDecided("Game has already been reviewed.")
    game.approval_status = Game.APPROVAL_APPROVED
    game.approved_by = admin
    game.approved_at = timezone.now()
    game.is_active = True
    game.save(update_fields=["approval_status", "approved_by", "approved_at", "is_active", "updated_at"])
    logger.info("Game %s approved by %s", game.pk, admin.pk)
    return game


def reject_game(*, admin, game: Game, reason: str) -> Game:
    ensure_can_manage(admin, Resource.CATALOG, Action.MANAGE)
    if game.approval_status != Game.APPROVAL_PENDING:
        raise AlreadyDecided("Game has already been reviewed.")
    game.approval_status = Game.APPROVAL_REJECTED
    game.rejection_reason = reason
    game.is_active = False
    game.save(update_fields=["approval_status", "rejection_reason", "is_active", "updated_at"])
    logger.info("Game %s rejected by %s", game.pk, admin.pk)
    return game
