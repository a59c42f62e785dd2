"""Selectors for inventory domain (single-location, read-only, no locking)."""

from typing import Dict, List

from django.db.models import Sum

from .models import Inventory, InventoryHistory


def list_inventories():
    return Inventory.objects.select_related("product").order_by("id")


def inventory_with_product(inventory: Inventory) -> dict:
    product = inventory.product
    return {
        "id": inventory.id,
        "product_id": inventory.product_id,
        "quantity": inventory.quantity,
        "version": inventory.version,
        "product": {
            "id": product.id,
            "name": product.name,
            "spec": product.spec,
            "original_price": product.original_price,
        },
    }


def list_histories(product_id: int):
    """History for one product, newest first."""

    return InventoryHistory.objects.filter(product_id=product_id).order_by("-imported_at", "-id")


def ledger_sums() -> Dict[int, int]:
    """Sum of history deltas per product id."""

    rows = InventoryHistory.objects.values("product_id").annotate(total=Sum("quantity"))
    return {row["product_id"]: int(row["total"] or 0) for row in rows}


def ledger_discrepancies() -> List[dict]:
    """Products whose stored quantity differs from the sum of their history."""

    sums = ledger_sums()
    out = []
    for inv in Inventory.objects.only("product_id", "quantity").order_by("product_id"):
        expected = sums.get(inv.product_id, 0)
        if int(inv.quantity) != expected:
            out.append({"product_id": inv.product_id, "quantity": int(inv.quantity), "ledger_total": expected})
    return out


# EOF
