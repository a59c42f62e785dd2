"""Service-level error taxonomy.

Every business operation raises one of these instead of a raw database
error. Database exceptions are translated once, where they are detected.
"""

from typing import Optional

from django.db import models


class ErrorCode(models.TextChoices):
    NOT_FOUND = "NOT_FOUND", "Not found"
    INVENTORY_VERSION_MISMATCH = "INVENTORY_VERSION_MISMATCH", "Inventory version mismatch"
    INVENTORY_QUANTITY_NEGATIVE = "INVENTORY_QUANTITY_NEGATIVE", "Inventory quantity negative"
    INVENTORY_QUANTITY_EXCEEDED = "INVENTORY_QUANTITY_EXCEEDED", "Inventory quantity exceeded"
    DUPLICATE_ORDER_ITEMS = "DUPLICATE_ORDER_ITEMS", "Duplicate order items"
    BAD_REQUEST = "BAD_REQUEST", "Bad request"
    UNAUTHORIZED = "UNAUTHORIZED", "Unauthorized"
    DB_DOWN = "DB_DOWN", "Database unavailable"


class ServiceError(Exception):
    """Base class carrying a stable code and an optional offending field."""

    code: ErrorCode = ErrorCode.BAD_REQUEST
    default_message = "Invalid request parameters"
    retryable = False

    def __init__(self, message: Optional[str] = None, *, field: Optional[str] = None):
        self.message = message or self.default_message
        self.field = field
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {"code": str(self.code), "message": self.message, "field": self.field}


class NotFoundError(ServiceError):
    code = ErrorCode.NOT_FOUND
    default_message = "Resource not found"


class VersionMismatchError(ServiceError):
    code = ErrorCode.INVENTORY_VERSION_MISMATCH
    default_message = "Inventory was modified by another request. Refetch and try again"
    retryable = True


class QuantityNegativeError(ServiceError):
    code = ErrorCode.INVENTORY_QUANTITY_NEGATIVE
    default_message = "Inventory quantity cannot be negative"


class QuantityExceededError(ServiceError):
    code = ErrorCode.INVENTORY_QUANTITY_EXCEEDED
    default_message = "Requested quantity exceeds inventory on hand"


class DuplicateOrderItemsError(ServiceError):
    code = ErrorCode.DUPLICATE_ORDER_ITEMS
    default_message = "Order contains duplicate lines for the same product and source"


class BadRequestError(ServiceError):
    code = ErrorCode.BAD_REQUEST


class UnauthorizedError(ServiceError):
    code = ErrorCode.UNAUTHORIZED
    default_message = "Authentication required"


class DbDownError(ServiceError):
    code = ErrorCode.DB_DOWN
    default_message = "Our database system is currently unavailable. Please try again in a few minutes"
    retryable = True
