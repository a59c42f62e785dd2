from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200)),
                ("spec", models.PositiveIntegerField(default=0, help_text="Units per box")),
                ("type", models.CharField(blank=True, max_length=64)),
                ("original_price", models.BigIntegerField(help_text="Cost price per unit (VND)")),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(original_price__gte=0), name="product_original_price_non_negative"
                    )
                ],
            },
        ),
    ]
