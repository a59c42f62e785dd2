"""Dashboard counters across catalog, customers, inventory and orders."""

from catalog.models import Product
from common.choices import DeliveryStatus
from customer.models import Customer
from django.conf import settings
from django.db.models import Count, Q, Sum
from inventory.models import Inventory

from .models import Order


def dashboard_stats() -> dict:
    threshold = int(settings.INVENTORY_LOW_STOCK_THRESHOLD)
    stock = Inventory.objects.aggregate(
        total=Sum("quantity"),
        low=Count("id", filter=Q(quantity__lt=threshold)),
    )
    orders = Order.objects.aggregate(
        total=Count("id"),
        pending=Count("id", filter=~Q(delivery_status=DeliveryStatus.COMPLETED)),
    )
    return {
        "total_products": Product.objects.count(),
        "total_customers": Customer.objects.count(),
        "total_inventory_items": int(stock["total"] or 0),
        "low_stock_products": int(stock["low"] or 0),
        "total_orders": int(orders["total"] or 0),
        "pending_orders": int(orders["pending"] or 0),
    }
