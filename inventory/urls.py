from django.urls import path

from .views import InventoryHistoryListView, InventoryListView, InventoryQuantityView, ProductInventoryView

urlpatterns = [
    path("inventory/", InventoryListView.as_view(), name="inventory-list"),
    path("products/<int:product_id>/inventory/", ProductInventoryView.as_view(), name="product-inventory"),
    path(
        "products/<int:product_id>/inventory/quantity/",
        InventoryQuantityView.as_view(),
        name="product-inventory-quantity",
    ),
    path(
        "products/<int:product_id>/inventory/histories/",
        InventoryHistoryListView.as_view(),
        name="product-inventory-histories",
    ),
]

# EOF
