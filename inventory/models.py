"""Inventory models (single-location, one row per product).

``Inventory.quantity`` and ``Inventory.version`` are only ever written by
``inventory.store.conditional_update_quantity``. Every such write appends
exactly one ``InventoryHistory`` row in the same transaction.
"""

import uuid

from django.db import models


def new_version() -> str:
    return str(uuid.uuid4())


class Inventory(models.Model):
    product = models.OneToOneField("catalog.Product", on_delete=models.CASCADE, related_name="inventory")
    quantity = models.IntegerField(default=0)
    version = models.CharField(max_length=36, default=new_version)

    class Meta:
        db_table = "inventory"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(name="inventory_quantity_non_negative", condition=models.Q(quantity__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Inventory<{self.product_id}> q={self.quantity} v={self.version[:8]}"


class InventoryHistory(models.Model):
    """Append-only record of one quantity change."""

    product = models.ForeignKey("catalog.Product", on_delete=models.CASCADE, related_name="inventory_histories")
    quantity = models.IntegerField()  # signed: +added, -consumed
    final_quantity = models.IntegerField()
    importer_name = models.CharField(max_length=150)
    imported_at = models.DateTimeField()
    note = models.TextField(blank=True)
    # Plain id: the order may be deleted later while its history must stay
    reference_id = models.BigIntegerField(null=True, blank=True)

    class Meta:
        db_table = "inventory_histories"
        ordering = ["-imported_at", "-id"]
        constraints = [
            models.CheckConstraint(name="history_quantity_non_zero", condition=~models.Q(quantity=0)),
            models.CheckConstraint(name="history_final_quantity_non_negative", condition=models.Q(final_quantity__gte=0)),
        ]
        indexes = [
            models.Index(fields=["product", "imported_at"], name="inv_history_product_time_idx"),
            models.Index(fields=["reference_id"], name="inv_history_reference_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.quantity:+d} for {self.product_id} -> {self.final_quantity}"


# EOF
