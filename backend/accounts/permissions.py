"""
Authorization gate.

Every mutating operation asks ``can_manage(role, resource, action)`` before it
touches data. Roles are ranked customer < partner < admin < super_admin and each
(resource, action) pair names the lowest role allowed to perform it. Ownership
(renter owns booking, partner owns game) is a separate check done with
``ensure_owner``; both must pass.
"""

from rest_framework.permissions import BasePermission

from accounts.models import User
from core.exceptions import InsufficientPermission, NotOwned

ROLE_RANK = {
    User.CUSTOMER: 0,
    User.PARTNER: 1,
    User.ADMIN: 2,
    User.SUPER_ADMIN: 3,
}


class Resource:
    CATALOG = "catalog"
    CATEGORY = "category"
    BOOKING = "booking"
    PAYMENT = "payment"
    USER = "user"
    ADMIN_ACCOUNT = "admin_account"
    PARTNER_APPLICATION = "partner_application"
    REVIEW = "review"
    DISPUTE = "dispute"


class Action:
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"


POLICY = {
    (Resource.CATALOG, Action.CREATE): User.PARTNER,
    (Resource.CATALOG, Action.UPDATE): User.PARTNER,
    (Resource.CATALOG, Action.MANAGE): User.ADMIN,
    (Resource.CATEGORY, Action.MANAGE): User.ADMIN,
    (Resource.BOOKING, Action.CREATE): User.CUSTOMER,
    (Resource.BOOKING, Action.UPDATE): User.CUSTOMER,
    (Resource.BOOKING, Action.MANAGE): User.ADMIN,
    (Resource.PAYMENT, Action.CREATE): User.CUSTOMER,
    (Resource.PAYMENT, Action.MANAGE): User.ADMIN,
    (Resource.USER, Action.MANAGE): User.ADMIN,
    (Resource.USER, Action.DELETE): User.SUPER_ADMIN,
    (Resource.ADMIN_ACCOUNT, Action.MANAGE): User.SUPER_ADMIN,
    (Resource.PARTNER_APPLICATION, Action.CREATE): User.CUSTOMER,
    (Resource.PARTNER_APPLICATION, Action.MANAGE): User.ADMIN,
    (Resource.REVIEW, Action.CREATE): User.CUSTOMER,
    (Resource.DISPUTE, Action.CREATE): User.CUSTOMER,
    (Resource.DISPUTE, Action.MANAGE): User.ADMIN,
}


def can_manage(role: str, resource: str, action: str) -> bool:
    minimum = POLICY.get((resource, action))
    if minimum is None or role not in ROLE_RANK:
        return False
    return ROLE_RANK[role] >= ROLE_RANK[minimum]


def ensure_can_manage(user, resource: str, action: str) -> None:
    if not can_manage(getattr(user, "role", None), resource, action):
        raise InsufficientPermission()


def ensure_owner(owner_id, user) -> None:
    if owner_id != user.pk:
        raise NotOwned()


class RoleGate(BasePermission):
    """
    DRF adapter for the gate.

    Views declare ``gate_rules`` mapping a viewset action (or lower-case HTTP
    method for plain views) to a ``(resource, action)`` pair; ``"*"`` is the
    fallback. Keys without a rule are left to the other permission classes.
    """

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        rules = getattr(view, "gate_rules", {})
        key = getattr(view, "action", None) or request.method.lower()
        rule = rules.get(key, rules.get("*"))
        if rule is None:
            return True
        ensure_can_manage(request.user, *rule)
        return True
