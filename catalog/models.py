"""Catalog app models.

The product catalog is read-only from the point of view of inventory and
orders: they only look up a product's name and original (cost) price.
"""

from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Product(TimeStampedModel):
    """Tradeable product with its purchase price in VND."""

    name = models.CharField(max_length=200)
    spec = models.PositiveIntegerField(default=0, help_text="Units per box")
    type = models.CharField(max_length=64, blank=True)
    original_price = models.BigIntegerField(help_text="Cost price per unit (VND)")

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(name="product_original_price_non_negative", condition=models.Q(original_price__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.name
