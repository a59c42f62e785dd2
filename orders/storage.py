"""Access URLs for order images kept in object storage.

Uploading and signing are the storage backend's job; with an S3 backend
the URL returned by ``storage.url`` is already short-lived
(``AWS_QUERYSTRING_EXPIRE`` follows ``ORDER_IMAGE_URL_TTL_SECONDS``).
"""

import logging

from django.core.files.storage import default_storage

logger = logging.getLogger("tradeflow.orders")


def image_url(storage_key: str, storage=None) -> str:
    """Return an access URL for ``storage_key``, or ``""`` if the backend fails."""

    storage = storage or default_storage
    try:
        return storage.url(storage_key)
    except Exception as exc:  # backend-specific failures; the order view must still render
        logger.warning(
            "order.image_url_failed",
            extra={"event": "order.image_url_failed", "storage_key": storage_key, "error": str(exc)},
        )
        return ""
