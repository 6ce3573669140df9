"""
Inventory ledger for rentable games.

``Game.available_stock`` is the single source of truth for how many units can
still be booked. Every change goes through a single conditional UPDATE so two
concurrent bookings can never both take the last unit; nothing here reads the
row and writes it back.
"""

from __future__ import annotations

import logging

from django.db.models import F

from catalog.models import Game
from core.exceptions import StockInsufficient

logger = logging.getLogger(__name__)


def reserve(game_id: int) -> None:
    """Take one unit of stock or raise ``StockInsufficient``."""

    updated = Game.objects.filter(pk=game_id, available_stock__gt=0).update(
        available_stock=F("available_stock") - 1
    )
    if not updated:
        logger.info("Stock reservation refused for game %s", game_id)
        raise StockInsufficient()


def release(game_id: int) -> bool:
    """
    Return one unit of stock, never exceeding the game's total stock.

    Returns False when the release was clamped, which points at a double
    release upstream; the caller's transition still goes ahead.
    """

    updated = Game.objects.filter(pk=game_id, available_stock__lt=F("stock")).update(
        available_stock=F("available_stock") + 1
    )
    if not updated:
        logger.warning("Stock release for game %s clamped at total stock", game_id)
        return False
    return True


def check_availability(game_id: int) -> bool:
    """Advisory read; only ``reserve`` actually holds a unit."""

    return Game.objects.filter(pk=game_id, available_stock__gt=0).exists()


def adjust_total_stock(game: Game, new_stock: int) -> None:
    """
    Change a listing's total stock, moving available stock by the same delta.

    Units currently rented out stay committed, so lowering the total below the
    number of rented units is refused.
    """

    # rented = stock - available_stock must stay <= new_stock
    updated = Game.objects.filter(
        pk=game.pk, stock__lte=F("available_stock") + new_stock
    ).update(
        available_stock=F("available_stock") + new_stock - F("stock"),
        stock=new_stock,
    )
    game.refresh_from_db(fields=["stock", "available_stock"])
    if not updated:
        raise StockInsufficient(
            "Units currently booked exceed the requested stock."
        )
