"""Inventory ledger store and history log.

Repository-level access to ``Inventory`` and ``InventoryHistory`` rows.
Every function takes an explicit ``Session``; locking reads and the
conditional update require a transactional one (see ``common.db``).

``conditional_update_quantity`` is the only code path that writes
``Inventory.quantity`` or ``Inventory.version``.
"""

import logging
from typing import Dict, Iterable, Optional

from common.db import Session, translate_db_errors
from common.errors import NotFoundError, QuantityNegativeError, VersionMismatchError
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from .models import Inventory, InventoryHistory, new_version

logger = logging.getLogger("tradeflow.inventory")


def get_by_product(product_id: int, session: Optional[Session] = None) -> Inventory:
    """Unlocked read, for display."""

    session = session or Session.autonomous()
    with translate_db_errors("inventory.get_by_product"):
        try:
            return Inventory.objects.using(session.using).get(product_id=product_id)
        except Inventory.DoesNotExist:
            raise NotFoundError(f"Inventory for product {product_id} not found", field="product_id")


def get_by_product_for_update(product_id: int, session: Session) -> Inventory:
    """Read the row under ``SELECT ... FOR UPDATE`` inside the session's transaction."""

    session.require_transaction()
    with translate_db_errors("inventory.get_by_product_for_update"):
        try:
            return Inventory.objects.using(session.using).select_for_update().get(product_id=product_id)
        except Inventory.DoesNotExist:
            raise NotFoundError(f"Inventory for product {product_id} not found", field="product_id")


def lock_many(product_ids: Iterable[int], session: Session) -> Dict[int, Inventory]:
    """Lock several rows in one round trip and return them keyed by product id.

    Rows are locked in ascending product id order so two transactions
    touching overlapping products cannot deadlock each other.
    """

    session.require_transaction()
    wanted = sorted(set(product_ids))
    if not wanted:
        return {}
    with translate_db_errors("inventory.lock_many"):
        rows = list(
            Inventory.objects.using(session.using)
            .select_for_update()
            .filter(product_id__in=wanted)
            .order_by("product_id")
        )
    locked = {row.product_id: row for row in rows}
    missing = [pid for pid in wanted if pid not in locked]
    if missing:
        raise NotFoundError(f"Inventory for product {missing[0]} not found", field="product_id")
    return locked


def conditional_update_quantity(
    product_id: int, delta: int, expected_version: str, new_version: str, session: Session
) -> None:
    """Apply ``quantity += delta`` and swap the version, only if the version still matches.

    Raises VersionMismatchError when no row carries ``expected_version`` and
    QuantityNegativeError when the check constraint rejects the result.
    """

    if new_version == expected_version:
        raise ValueError("new_version must differ from expected_version")
    qs = Inventory.objects.using(session.using).filter(product_id=product_id, version=expected_version)
    with translate_db_errors("inventory.conditional_update_quantity"):
        try:
            # Savepoint so a constraint failure leaves the outer transaction usable
            with transaction.atomic(using=session.using):
                updated = qs.update(quantity=F("quantity") + delta, version=new_version)
        except IntegrityError as exc:
            # quantity is the only constrained column this statement touches
            raise QuantityNegativeError(field="quantity") from exc
    if updated == 0:
        raise VersionMismatchError(field="version")


def create_for_product(product_id: int, session: Session) -> Inventory:
    """Create the empty inventory row for a freshly created product."""

    with translate_db_errors("inventory.create_for_product"):
        return Inventory.objects.using(session.using).create(product_id=product_id, quantity=0, version=new_version())


def append_history(
    *,
    product_id: int,
    delta: int,
    final_quantity: int,
    actor_name: str,
    note: str = "",
    reference_id: Optional[int] = None,
    session: Session,
) -> InventoryHistory:
    with translate_db_errors("inventory.append_history"):
        return InventoryHistory.objects.using(session.using).create(
            product_id=product_id,
            quantity=delta,
            final_quantity=final_quantity,
            importer_name=actor_name,
            imported_at=timezone.now(),
            note=note,
            reference_id=reference_id,
        )


def apply_locked_delta(
    inventory: Inventory,
    delta: int,
    *,
    actor_name: str,
    note: str = "",
    reference_id: Optional[int] = None,
    session: Session,
) -> InventoryHistory:
    """Move stock on a row already locked by this session and log it.

    ``inventory`` is the caller's in-memory snapshot; it is refreshed in place
    with the new quantity and version so later steps in the same
    transaction see the effect without re-querying.
    """

    session.require_transaction()
    version = new_version()
    conditional_update_quantity(inventory.product_id, delta, inventory.version, version, session)
    final_quantity = int(inventory.quantity) + int(delta)
    history = append_history(
        product_id=inventory.product_id,
        delta=delta,
        final_quantity=final_quantity,
        actor_name=actor_name,
        note=note,
        reference_id=reference_id,
        session=session,
    )
    inventory.quantity = final_quantity
    inventory.version = version
    logger.info(
        "inventory.quantity_changed",
        extra={
            "event": "inventory.quantity_changed",
            "product_id": inventory.product_id,
            "delta": delta,
            "final_quantity": final_quantity,
            "reference_id": reference_id,
        },
    )
    return history


# EOF
