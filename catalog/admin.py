"""Admin registration for catalog models."""

from django.contrib import admin

from .models import Product
from .services import create_product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "spec", "type", "original_price", "updated_at")
    search_fields = ("name", "type")
    list_filter = ("type",)

    def save_model(self, request, obj, form, change):
        if change:
            super().save_model(request, obj, form, change)
            return
        # New products need their inventory row
        created = create_product(name=obj.name, original_price=obj.original_price, spec=obj.spec, type=obj.type)
        obj.pk = created.pk
        obj._state.adding = False
