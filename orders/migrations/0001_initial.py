import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        ("customer", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("order_date", models.DateTimeField()),
                (
                    "delivery_status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("DELIVERED", "Delivered"),
                            ("UNPAID", "Unpaid"),
                            ("COMPLETED", "Completed"),
                        ],
                        db_index=True,
                        default="PENDING",
                        max_length=16,
                    ),
                ),
                ("debt_status", models.CharField(blank=True, max_length=64)),
                ("status_transitioned_at", models.DateTimeField(blank=True, null=True)),
                ("total_original_cost", models.BigIntegerField(default=0)),
                ("total_sales_revenue", models.BigIntegerField(default=0)),
                ("additional_cost", models.BigIntegerField(default=0)),
                ("additional_cost_note", models.TextField(blank=True)),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="orders", to="customer.customer"
                    ),
                ),
            ],
            options={
                "db_table": "orders",
                "ordering": ["-id"],
                "indexes": [
                    models.Index(fields=["customer", "delivery_status"], name="order_customer_status_idx"),
                    models.Index(fields=["order_date"], name="order_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("number_of_boxes", models.PositiveIntegerField(blank=True, null=True)),
                ("spec", models.PositiveIntegerField(blank=True, null=True)),
                ("quantity", models.PositiveIntegerField()),
                ("selling_price", models.BigIntegerField()),
                ("original_price", models.BigIntegerField()),
                ("discount", models.PositiveSmallIntegerField(default=0, help_text="Percent, 0-100")),
                ("final_amount", models.BigIntegerField(blank=True, null=True)),
                (
                    "export_from",
                    models.CharField(choices=[("INVENTORY", "Inventory"), ("EXTERNAL", "External")], max_length=16),
                ),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="items", to="orders.order"
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="order_items", to="catalog.product"
                    ),
                ),
            ],
            options={
                "db_table": "order_items",
                "ordering": ["id"],
                "constraints": [
                    models.UniqueConstraint(fields=("order", "product", "export_from"), name="uniq_order_product_source"),
                    models.CheckConstraint(condition=models.Q(quantity__gt=0), name="orderitem_quantity_positive"),
                    models.CheckConstraint(condition=models.Q(discount__lte=100), name="orderitem_discount_range"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderImage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("storage_key", models.CharField(max_length=512)),
                (
                    "image_type",
                    models.CharField(
                        choices=[("invoice", "Invoice"), ("delivery", "Delivery proof"), ("other", "Other")],
                        default="other",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="images", to="orders.order"
                    ),
                ),
            ],
            options={
                "db_table": "order_images",
                "ordering": ["id"],
            },
        ),
    ]
