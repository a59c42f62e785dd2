"""Shared enumerations and choices used across apps."""

from django.db import models


class DeliveryStatus(models.TextChoices):
    """Lifecycle statuses for order delivery."""

    PENDING = "PENDING", "Pending"
    DELIVERED = "DELIVERED", "Delivered"
    UNPAID = "UNPAID", "Unpaid"
    COMPLETED = "COMPLETED", "Completed"


class ExportSource(models.TextChoices):
    """Where the quantity of an order line comes from."""

    INVENTORY = "INVENTORY", "Inventory"
    EXTERNAL = "EXTERNAL", "External"


class OrderSort(models.TextChoices):
    ID_DESC = "id_desc", "Newest first"
    ORDER_DATE_ASC = "order_date_asc", "Order date ascending"
    ORDER_DATE_DESC = "order_date_desc", "Order date descending"


class FulfillmentMode(models.TextChoices):
    """Order creation algorithms.

    ``declared`` trusts the export source sent with each line; ``auto_split``
    is the legacy mode where the engine splits a line between inventory and
    external sourcing when stock runs short.
    """

    DECLARED = "declared", "Declared source"
    AUTO_SPLIT = "auto_split", "Automatic split"


class ImageType(models.TextChoices):
    INVOICE = "invoice", "Invoice"
    DELIVERY = "delivery", "Delivery proof"
    OTHER = "other", "Other"


def parse_choice(choices, value, *, field: str):
    """Return ``choices(value)`` or raise a BadRequestError naming ``field``."""

    from .errors import BadRequestError

    try:
        return choices(value)
    except ValueError:
        raise BadRequestError(f"Invalid value {value!r}", field=field)
