import django.db.models.deletion
import inventory.models
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Inventory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.IntegerField(default=0)),
                ("version", models.CharField(default=inventory.models.new_version, max_length=36)),
                (
                    "product",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE, related_name="inventory", to="catalog.product"
                    ),
                ),
            ],
            options={
                "db_table": "inventory",
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(quantity__gte=0), name="inventory_quantity_non_negative")
                ],
            },
        ),
        migrations.CreateModel(
            name="InventoryHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.IntegerField()),
                ("final_quantity", models.IntegerField()),
                ("importer_name", models.CharField(max_length=150)),
                ("imported_at", models.DateTimeField()),
                ("note", models.TextField(blank=True)),
                ("reference_id", models.BigIntegerField(blank=True, null=True)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="inventory_histories",
                        to="catalog.product",
                    ),
                ),
            ],
            options={
                "db_table": "inventory_histories",
                "ordering": ["-imported_at", "-id"],
                "indexes": [
                    models.Index(fields=["product", "imported_at"], name="inv_history_product_time_idx"),
                    models.Index(fields=["reference_id"], name="inv_history_reference_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("quantity", 0), _negated=True), name="history_quantity_non_zero"),
                    models.CheckConstraint(
                        condition=models.Q(final_quantity__gte=0), name="history_final_quantity_non_negative"
                    ),
                ],
            },
        ),
    ]
