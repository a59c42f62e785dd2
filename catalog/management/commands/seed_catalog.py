"""Seed a small catalog with opening stock for local development.

Re-running is idempotent: products are reused by name and only receive
opening stock when their history is still empty.
"""

from catalog.models import Product
from catalog.services import create_product
from common.db import UnitOfWork
from customer.models import Customer
from django.core.management.base import BaseCommand
from inventory import store
from inventory.models import InventoryHistory

PRODUCTS = [
    {"name": "Floor tile 60x60", "spec": 4, "type": "ceramic", "original_price": 120_000, "stock": 80},
    {"name": "Wall tile 30x60", "spec": 8, "type": "ceramic", "original_price": 65_000, "stock": 150},
    {"name": "Tile adhesive 25kg", "spec": 1, "type": "adhesive", "original_price": 180_000, "stock": 6},
]

CUSTOMERS = [
    {"name": "Nguyen Van A", "phone": "0901234567", "address": "12 Le Loi, District 1", "location_type": "city"},
    {"name": "Tran Thi B", "phone": "0912345678", "address": "45 Hai Ba Trung", "location_type": "province"},
]


class Command(BaseCommand):
    help = "Seed products with opening stock and a few customers"

    def handle(self, *args, **options):
        self.stdout.write("Seeding catalog data...")

        for row in PRODUCTS:
            product = Product.objects.filter(name=row["name"]).first()
            if product is None:
                product = create_product(
                    name=row["name"], spec=row["spec"], type=row["type"], original_price=row["original_price"]
                )
            if not InventoryHistory.objects.filter(product=product).exists():
                with UnitOfWork().atomic() as session:
                    inventory = store.get_by_product_for_update(product.id, session)
                    store.apply_locked_delta(
                        inventory, row["stock"], actor_name="seed", note="Opening stock", session=session
                    )

        for data in CUSTOMERS:
            Customer.objects.get_or_create(phone=data["phone"], defaults=data)

        self.stdout.write(self.style.SUCCESS("Catalog seeded"))
