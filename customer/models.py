"""Customer domain models.

Customers are the buyers orders are placed for. They are looked up by id
when rendering orders and never mutated by the fulfillment engine.
"""

from catalog.models import TimeStampedModel
from django.core.validators import RegexValidator
from django.db import models


class Customer(TimeStampedModel):
    name = models.CharField(max_length=200)
    phone = models.CharField(
        max_length=16,
        blank=True,
        validators=[RegexValidator(r"^\+?[0-9]{6,15}$", message="Use digits, optionally prefixed by +")],
    )
    address = models.CharField(max_length=255, blank=True)
    location_type = models.CharField(max_length=32, blank=True)

    class Meta:
        ordering = ["name", "id"]
        indexes = [
            models.Index(fields=["phone"], name="customer_phone_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.name} ({self.phone})" if self.phone else self.name
