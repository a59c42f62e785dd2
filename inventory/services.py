"""Inventory services: manual stock adjustments under optimistic locking."""

import logging
from typing import Optional

from common.db import UnitOfWork
from common.errors import BadRequestError, VersionMismatchError
from users.selectors import get_actor

from . import store
from .models import Inventory

logger = logging.getLogger("tradeflow.inventory")


def update_quantity(
    *,
    actor_id: Optional[int],
    product_id: int,
    delta: int,
    version: str,
    note: str = "",
    uow: Optional[UnitOfWork] = None,
) -> Inventory:
    """Add (positive ``delta``) or remove (negative) stock for a product.

    ``version`` is the token the caller read before deciding on the change;
    if another writer committed since, the call fails with
    VersionMismatchError and nothing is written.
    """

    if isinstance(delta, bool) or not isinstance(delta, int) or delta == 0:
        raise BadRequestError("Quantity change must be a non-zero integer", field="quantity")
    if not version:
        raise BadRequestError("Inventory version is required", field="version")
    actor = get_actor(actor_id)

    uow = uow or UnitOfWork()
    with uow.atomic() as session:
        locked = store.get_by_product_for_update(product_id, session)
        if locked.version != version:
            raise VersionMismatchError(field="version")
        previous = locked.quantity
        store.apply_locked_delta(locked, delta, actor_name=actor.display_name, note=note, session=session)

    logger.info(
        "inventory.quantity_updated",
        extra={
            "event": "inventory.quantity_updated",
            "product_id": product_id,
            "user_id": actor.id,
            "quantity_from": previous,
            "quantity_to": previous + delta,
        },
    )
    return store.get_by_product(product_id)


# EOF
