"""DRF serializers for Orders.

Input serializers only shape and type-check the request; business rules
(stock, versions, duplicate lines) are enforced by ``orders.services``.
Output serializers describe the read model built by ``orders.selectors``.
"""

from common.choices import DeliveryStatus, ExportSource
from rest_framework import serializers

from .services import CreateOrderCommand, OrderLine


class OrderItemRequestSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    number_of_boxes = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    spec = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    quantity = serializers.IntegerField(min_value=1)
    selling_price = serializers.IntegerField(min_value=0)
    discount = serializers.IntegerField(min_value=0, max_value=100, required=False, default=0)
    final_amount = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    version = serializers.CharField(max_length=36, required=False, allow_blank=True, default="")
    export_from = serializers.ChoiceField(choices=ExportSource.choices)


class CreateOrderSerializer(serializers.Serializer):
    customer_id = serializers.IntegerField(min_value=1)
    order_date = serializers.DateTimeField()
    delivery_status = serializers.ChoiceField(choices=DeliveryStatus.choices)
    debt_status = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)
    additional_cost = serializers.IntegerField(min_value=0, required=False, default=0)
    additional_cost_note = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    order_items = OrderItemRequestSerializer(many=True, allow_empty=False)

    def to_command(self) -> CreateOrderCommand:
        data = self.validated_data
        return CreateOrderCommand(
            customer_id=data["customer_id"],
            order_date=data["order_date"],
            delivery_status=data["delivery_status"],
            debt_status=data.get("debt_status") or "",
            additional_cost=data.get("additional_cost") or 0,
            additional_cost_note=data.get("additional_cost_note") or "",
            lines=[OrderLine(**line) for line in data["order_items"]],
        )


class UpdateOrderSerializer(serializers.Serializer):
    customer_id = serializers.IntegerField(min_value=1, required=False)
    order_date = serializers.DateTimeField(required=False)
    delivery_status = serializers.ChoiceField(choices=DeliveryStatus.choices, required=False)
    debt_status = serializers.CharField(max_length=64, required=False, allow_blank=True)
    additional_cost = serializers.IntegerField(min_value=0, required=False)
    additional_cost_note = serializers.CharField(required=False, allow_blank=True)


class CustomerSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField(allow_null=True)
    name = serializers.CharField()
    phone = serializers.CharField()
    address = serializers.CharField()


class OrderImageViewSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    image_type = serializers.CharField()
    s3_key = serializers.CharField()
    image_url = serializers.CharField(allow_blank=True)


class OrderItemViewSerializer(serializers.Serializer):
    """Order line with profit/loss computed from the price snapshots."""

    id = serializers.IntegerField()
    order_id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    product_name = serializers.CharField()
    number_of_boxes = serializers.IntegerField(allow_null=True)
    spec = serializers.IntegerField(allow_null=True)
    quantity = serializers.IntegerField()
    selling_price = serializers.IntegerField()
    discount = serializers.IntegerField()
    final_amount = serializers.IntegerField()
    export_from = serializers.CharField()
    original_price = serializers.IntegerField()
    profit_loss = serializers.IntegerField()
    profit_loss_percentage = serializers.FloatField(allow_null=True)


class OrderViewSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    order_date = serializers.DateTimeField()
    delivery_status = serializers.CharField()
    debt_status = serializers.CharField(allow_null=True)
    status_transitioned_at = serializers.DateTimeField(allow_null=True)
    additional_cost = serializers.IntegerField()
    additional_cost_note = serializers.CharField(allow_null=True)
    customer = CustomerSummarySerializer()
    order_items = OrderItemViewSerializer(many=True, required=False)
    images = OrderImageViewSerializer(many=True)
    total_amount = serializers.IntegerField()
    product_count = serializers.IntegerField()
    total_original_cost = serializers.IntegerField()
    total_sales_revenue = serializers.IntegerField()
    total_profit_loss = serializers.IntegerField()
    total_profit_loss_percentage = serializers.FloatField(allow_null=True)


class DashboardStatsSerializer(serializers.Serializer):
    total_products = serializers.IntegerField()
    total_customers = serializers.IntegerField()
    total_inventory_items = serializers.IntegerField()
    low_stock_products = serializers.IntegerField()
    total_orders = serializers.IntegerField()
    pending_orders = serializers.IntegerField()
