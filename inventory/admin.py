"""Admin registrations for inventory app.

Quantities are read-only here: stock only moves through the services so
every change lands in the history log.
"""

from django.contrib import admin

from .models import Inventory, InventoryHistory


@admin.register(Inventory)
class InventoryAdmin(admin.ModelAdmin):
    list_display = ("id", "product", "quantity", "version")
    search_fields = ("product__name",)
    readonly_fields = ("product", "quantity", "version")

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(InventoryHistory)
class InventoryHistoryAdmin(admin.ModelAdmin):
    list_display = ("id", "product", "quantity", "final_quantity", "importer_name", "imported_at", "reference_id")
    search_fields = ("product__name", "importer_name", "note")
    list_filter = ("imported_at",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# EOF
