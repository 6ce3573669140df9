from __future__ import annotations

import logging

from django.db.models import ProtectedError

from accounts.models import User
from accounts.permissions import Action, Resource, ensure_can_manage
from core.exceptions import RuleViolation

logger = logging.getLogger(__name__)

PRIVILEGED_ROLES = {User.ADMIN, User.SUPER_ADMIN}


def _ensure_can_touch(actor: User, target: User) -> None:
    ensure_can_manage(actor, Resource.USER, Action.MANAGE)
    if target.role in PRIVILEGED_ROLES:
        ensure_can_manage(actor, Resource.ADMIN_ACCOUNT, Action.MANAGE)


def update_role(*, actor: User, target: User, role: str) -> User:
    _ensure_can_touch(actor, target)
    if role in PRIVILEGED_ROLES:
        ensure_can_manage(actor, Resource.ADMIN_ACCOUNT, Action.MANAGE)
    if actor.pk == target.pk:
        raise RuleViolation("You cannot change your own role.")
    target.role = role
    target.save(update_fields=["role"])
    logger.info("User %s role changed to %s by %s", target.pk, role, actor.pk)
    return target


def toggle_active(*, actor: User, target: User) -> User:
    _ensure_can_touch(actor, target)
    if actor.pk == target.pk:
        raise RuleViolation("You cannot deactivate yourself.")
    target.is_active = not target.is_active
    target.save(update_fields=["is_active"])
    logger.info("User %s active=%s set by %s", target.pk, target.is_active, actor.pk)
    return target


def delete_user(*, actor: User, target: User) -> None:
    ensure_can_manage(actor, Resource.USER, Action.DELETE)
    if actor.pk == target.pk:
        raise RuleViolation("You cannot delete yourself.")
    try:
        target.delete()
    except ProtectedError:
        raise RuleViolation("User has bookings on record; deactivate the account instead.")
    logger.info("User %s deleted by %s", target.email, actor.pk)
