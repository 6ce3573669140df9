from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from accounts.models import User
from accounts.permissions import Action, Resource, ensure_can_manage
from core.exceptions import AlreadyDecided, DuplicateRecord, RuleViolation

from .models import PartnerApplication

logger = logging.getLogger(__name__)


def submit_application(*, user: User, data: dict) -> PartnerApplication:
    ensure_can_manage(user, Resource.PARTNER_APPLICATION, Action.CREATE)
    if user.role != User.CUSTOMER:
        raise RuleViolation("Only customers can apply to become partners.")
    if PartnerApplication.objects.filter(user=user).exists():
        raise DuplicateRecord("You have already submitted a partner application.")
    application = PartnerApplication.objects.create(user=user, **data)
    logger.info("Partner application %s submitted by user %s", application.pk, user.pk)
    return application


def _lock_pending(application: PartnerApplication) -> PartnerApplication:
    application = PartnerApplication.objects.select_for_update().get(pk=application.pk)
    if application.status != PartnerApplication.PENDING:
        raise AlreadyDecided("Application has already been decided.")
    return application


@transaction.atomic
def approve_application(*, admin: User, application: PartnerApplication) -> PartnerApplication:
    ensure_can_manage(admin, Resource.PARTNER_APPLICATION, Action.MANAGE)
    application = _lock_pending(application)
    application.status = PartnerApplication.APPROVED
    application.decided_at = timezone.now()
    application.decided_by = admin
    application.save(update_fields=["status", "decided_at", "decided_by"])

    applicant = application.user
    if applicant.role == User.CUSTOMER:
        applicant.role = User.PARTNER
        applicant.save(update_fields=["role"])
    logger.info("Partner application %s approved by %s", application.pk, admin.pk)
    return application


@transaction.atomic
def reject_application(*, admin: User, application: PartnerApplication, reason: str) -> PartnerApplication:
    ensure_can_manage(admin, Resource.PARTNER_APPLICATION, Action.MANAGE)
    application = _lock_pending(application)
    application.status = PartnerApplication.REJECTED
    application.rejection_reason = reason
    application.decided_at = timezone.now()
    application.decided_by = admin
    application.save(update_fields=["status", "rejection_reason", "decided_at", "decided_by"])
    logger.info("Partner application %s rejected by %s", application.pk, admin.pk)
    return application
