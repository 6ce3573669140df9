"""
Domain errors shared by every app.

Each error is a DRF ``APIException`` so views can let it propagate and the
framework renders the right 4xx response. ``api_exception_handler`` adds the
logging on top: permission failures go to the audit logger with their error
code, anything unexpected is logged with the full request context.
"""

import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("respawn.audit")


class NotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found."
    default_code = "not_found"


class NotOwned(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not own this resource."
    default_code = "not_owned"


class InsufficientPermission(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Insufficient permission."
    default_code = "insufficient_permission"


class InvalidDateRange(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid booking dates."
    default_code = "invalid_date_range"


class GameUnavailable(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Game is not available for booking."
    default_code = "game_unavailable"


class StockInsufficient(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Insufficient stock."
    default_code = "stock_insufficient"


class InvalidTransition(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Status transition not allowed."
    default_code = "invalid_transition"


class CannotCancelInCurrentState(InvalidTransition):
    default_detail = "Cannot cancel booking in current status."
    default_code = "cannot_cancel"


class NotInPendingPaymentState(InvalidTransition):
    default_detail = "Booking is not in pending payment status."
    default_code = "not_pending_payment"


class PaymentNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Payment not found."
    default_code = "payment_not_found"


class PaymentAlreadyExists(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Payment already exists for this booking."
    default_code = "payment_exists"


class UnknownPaymentStatus(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Unknown transaction status."
    default_code = "unknown_payment_status"


class PaymentGatewayError(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Payment gateway error."
    default_code = "payment_gateway_error"


class AlreadyDecided(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This record has already been decided."
    default_code = "already_decided"


class DuplicateRecord(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "A matching record already exists."
    default_code = "duplicate_record"


class RuleViolation(APIException):
    """A request that is well formed but breaks a business rule."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request violates a business rule."
    default_code = "rule_violation"


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    request = context.get("request")
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else None
    user_id = getattr(getattr(request, "user", None), "pk", None)

    if isinstance(exc, (NotOwned, InsufficientPermission)):
        audit_logger.warning(
            "access denied code=%s user=%s view=%s path=%s",
            exc.default_code,
            user_id,
            view_name,
            getattr(request, "path", None),
        )
    elif response is None:
        logger.error(
            "Unhandled error in %s for user=%s path=%s",
            view_name,
            user_id,
            getattr(request, "path", None),
            exc_info=exc,
        )
    elif response.status_code >= 500:
        logger.error("Server error in %s: %s", view_name, exc, exc_info=exc)
    return response
