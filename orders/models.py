from catalog.models import TimeStampedModel
from common.choices import DeliveryStatus, ExportSource, ImageType
from django.db import models


class Order(TimeStampedModel):
    """Customer order.

    ``total_original_cost`` and ``total_sales_revenue`` are captured when the
    order is created and never recomputed from the catalog afterwards.
    """

    customer = models.ForeignKey("customer.Customer", related_name="orders", on_delete=models.PROTECT)
    order_date = models.DateTimeField()
    delivery_status = models.CharField(
        max_length=16, choices=DeliveryStatus.choices, default=DeliveryStatus.PENDING, db_index=True
    )
    debt_status = models.CharField(max_length=64, blank=True)
    status_transitioned_at = models.DateTimeField(null=True, blank=True)
    total_original_cost = models.BigIntegerField(default=0)
    total_sales_revenue = models.BigIntegerField(default=0)
    additional_cost = models.BigIntegerField(default=0)
    additional_cost_note = models.TextField(blank=True)

    class Meta:
        db_table = "orders"
        ordering = ["-id"]
        indexes = [
            models.Index(fields=["customer", "delivery_status"], name="order_customer_status_idx"),
            models.Index(fields=["order_date"], name="order_date_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Order#{self.id} customer={self.customer_id} status={self.delivery_status}"


class OrderItem(models.Model):
    """One order line, sourced either from inventory or externally.

    Prices are snapshots taken at order time.
    """

    order = models.ForeignKey(Order, related_name="items", on_delete=models.CASCADE)
    product = models.ForeignKey("catalog.Product", related_name="order_items", on_delete=models.PROTECT)
    number_of_boxes = models.PositiveIntegerField(null=True, blank=True)
    spec = models.PositiveIntegerField(null=True, blank=True)
    quantity = models.PositiveIntegerField()
    selling_price = models.BigIntegerField()
    original_price = models.BigIntegerField()
    discount = models.PositiveSmallIntegerField(default=0, help_text="Percent, 0-100")
    final_amount = models.BigIntegerField(null=True, blank=True)
    export_from = models.CharField(max_length=16, choices=ExportSource.choices)

    class Meta:
        db_table = "order_items"
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["order", "product", "export_from"], name="uniq_order_product_source"),
            models.CheckConstraint(name="orderitem_quantity_positive", condition=models.Q(quantity__gt=0)),
            models.CheckConstraint(
                name="orderitem_discount_range", condition=models.Q(discount__lte=100)
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"OrderItem#{self.id} order={self.order_id} product={self.product_id} qty={self.quantity}"


class OrderImage(models.Model):
    """Image attached to an order, stored by key in object storage."""

    order = models.ForeignKey(Order, related_name="images", on_delete=models.CASCADE)
    storage_key = models.CharField(max_length=512)
    image_type = models.CharField(max_length=16, choices=ImageType.choices, default=ImageType.OTHER)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "order_images"
        ordering = ["id"]


# EOF
