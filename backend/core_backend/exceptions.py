"""
Domain exceptions shared by every app, and the DRF exception handler that
renders them.

The taxonomy is deliberately small so callers can decide whether a retry makes
sense: only StoreError is retryable, everything else needs a different request.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class POSError(Exception):
    """Base exception for order-fulfillment errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = "pos_error"
    default_message = "Point-of-sale operation failed"
    retryable = False

    def __init__(self, message=None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(POSError):
    """Missing or malformed input. Fix the request, do not retry it."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "validation_error"
    default_message = "Invalid input"


class NotFoundError(POSError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "not_found"
    default_message = "Record not found"


class OrderNotFoundError(NotFoundError):
    default_code = "order_not_found"

    def __init__(self, order_id, message=None):
        self.order_id = order_id
        super().__init__(message or f"Order {order_id} not found", order_id=order_id)


class OrderItemNotFoundError(NotFoundError):
    default_code = "order_item_not_found"

    def __init__(self, item_ids, message=None):
        self.item_ids = list(item_ids)
        super().__init__(
            message or f"Order items not found: {', '.join(str(i) for i in self.item_ids)}",
            item_ids=self.item_ids,
        )


class TableNotFoundError(NotFoundError):
    default_code = "table_not_found"


class ConflictError(POSError):
    """The request collides with the current state held by another client."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "conflict"
    default_message = "Conflicting update"


class AlreadyClaimedError(ConflictError):
    default_code = "already_claimed"

    def __init__(self, order_id, message=None):
        self.order_id = order_id
        super().__init__(message or f"Order {order_id} is already claimed by a driver", order_id=order_id)


class TableOccupiedError(ConflictError):
    default_code = "table_occupied"

    def __init__(self, table_number, message=None):
        self.table_number = table_number
        super().__init__(message or f"Table {table_number} is occupied", table_number=table_number)


class RegisterClosedError(ConflictError):
    default_code = "register_closed"
    default_message = "Register is closed. Cannot place order."


class StateError(POSError):
    """The operation is not valid for the record's current status."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_code = "invalid_state"
    default_message = "Operation not allowed in the current state"


class StoreError(POSError):
    """The transaction failed to commit. Nothing was written; retrying is safe."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_code = "store_error"
    default_message = "Storage transaction failed"
    retryable = True


def pos_exception_handler(exc, context):
    """
    Render POSError subclasses as {"error", "code", "retryable"} and defer
    everything else to the default DRF handler.
    """
    if not isinstance(exc, POSError):
        return exception_handler(exc, context)

    view = context.get("view")
    view_name = view.__class__.__name__ if view else "unknown"
    if exc.status_code >= 500:
        logger.error(f"{view_name}: {exc.__class__.__name__}: {exc.message}", exc_info=exc)
    else:
        logger.info(f"{view_name}: {exc.__class__.__name__}: {exc.message}")

    payload = {
        "error": exc.message,
        "code": exc.default_code,
        "retryable": exc.retryable,
    }
    if exc.details:
        payload["details"] = exc.details
    return Response(payload, status=exc.status_code)
