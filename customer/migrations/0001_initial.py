import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200)),
                (
                    "phone",
                    models.CharField(
                        blank=True,
                        max_length=16,
                        validators=[
                            django.core.validators.RegexValidator(
                                "^\\+?[0-9]{6,15}$", message="Use digits, optionally prefixed by +"
                            )
                        ],
                    ),
                ),
                ("address", models.CharField(blank=True, max_length=255)),
                ("location_type", models.CharField(blank=True, max_length=32)),
            ],
            options={
                "ordering": ["name", "id"],
                "indexes": [models.Index(fields=["phone"], name="customer_phone_idx")],
            },
        ),
    ]
