"""Selectors for the catalog domain.

Read-only product lookups used by inventory and order fulfillment.
"""

from typing import Dict, Iterable

from common.db import Session, translate_db_errors
from common.errors import NotFoundError

from .models import Product


def get_product(product_id: int, session: Session | None = None) -> Product:
    session = session or Session.autonomous()
    with translate_db_errors("catalog.get_product"):
        try:
            return Product.objects.using(session.using).get(id=product_id)
        except Product.DoesNotExist:
            raise NotFoundError(f"Product {product_id} not found", field="product_id")


def get_products_by_ids(product_ids: Iterable[int], session: Session | None = None) -> Dict[int, Product]:
    """Return ``{id: product}``; raises NotFoundError if any id is unknown."""

    session = session or Session.autonomous()
    wanted = set(product_ids)
    with translate_db_errors("catalog.get_products_by_ids"):
        products = {p.id: p for p in Product.objects.using(session.using).filter(id__in=wanted)}
    missing = sorted(wanted - products.keys())
    if missing:
        raise NotFoundError(f"Product {missing[0]} not found", field="product_id")
    return products


def list_products():
    return Product.objects.order_by("id")
