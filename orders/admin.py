from django.contrib import admin

from . import services
from .models import Order, OrderImage, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = (
        "product",
        "quantity",
        "selling_price",
        "original_price",
        "discount",
        "final_amount",
        "export_from",
    )

    def has_add_permission(self, request, obj=None):
        return False


class OrderImageInline(admin.TabularInline):
    model = OrderImage
    extra = 0


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Orders are created through the API; deletion restores stock via the service."""

    list_display = ("id", "customer", "order_date", "delivery_status", "total_sales_revenue", "created_at")
    list_filter = ("delivery_status", "order_date")
    search_fields = ("customer__name", "customer__phone")
    date_hierarchy = "order_date"
    readonly_fields = ("total_original_cost", "total_sales_revenue", "status_transitioned_at")
    inlines = [OrderItemInline, OrderImageInline]

    def has_add_permission(self, request):
        return False

    def save_model(self, request, obj, form, change):
        if not change:
            return super().save_model(request, obj, form, change)
        # status changes must stamp status_transitioned_at
        services.update_order(
            actor_id=request.user.id,
            order_id=obj.id,
            customer_id=obj.customer_id,
            order_date=obj.order_date,
            delivery_status=obj.delivery_status,
            debt_status=obj.debt_status,
            additional_cost=obj.additional_cost,
            additional_cost_note=obj.additional_cost_note,
        )
        obj.refresh_from_db()

    def delete_model(self, request, obj):
        services.delete_order(actor_id=request.user.id, order_id=obj.id)

    def delete_queryset(self, request, queryset):
        for order_id in queryset.values_list("id", flat=True):
            services.delete_order(actor_id=request.user.id, order_id=order_id)
