"""Catalog mutations.

Products are created together with their inventory row so that every
product always has exactly one ``Inventory`` from the moment it exists.
"""

import logging
from typing import Optional

from common.db import UnitOfWork, translate_db_errors
from common.errors import BadRequestError
from inventory import store as inventory_store

from .models import Product

logger = logging.getLogger("tradeflow.catalog")


def create_product(
    *, name: str, original_price: int, spec: int = 0, type: str = "", uow: Optional[UnitOfWork] = None
) -> Product:
    if not name or not name.strip():
        raise BadRequestError("Product name is required", field="name")
    if original_price is None or int(original_price) < 0:
        raise BadRequestError("Original price must be zero or positive", field="original_price")

    uow = uow or UnitOfWork()
    with uow.atomic() as session:
        with translate_db_errors("catalog.create_product"):
            product = Product.objects.using(session.using).create(
                name=name.strip(), original_price=int(original_price), spec=int(spec or 0), type=type or ""
            )
        inventory_store.create_for_product(product.id, session)

    logger.info("catalog.product_created", extra={"event": "catalog.product_created", "product_id": product.id})
    return product
