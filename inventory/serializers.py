"""Serializers for inventory domain.

Read-only representations of inventory rows and their history, plus the
input shape of a manual quantity adjustment.
"""

from rest_framework import serializers

from .models import Inventory, InventoryHistory


class InventoryProductSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    spec = serializers.IntegerField()
    original_price = serializers.IntegerField()


class InventorySerializer(serializers.ModelSerializer):
    """Current stock for a product.

    ``version`` must be echoed back by clients on the next write.
    """

    class Meta:
        model = Inventory
        fields = ["id", "product_id", "quantity", "version"]
        read_only_fields = fields


class InventoryWithProductSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField()
    version = serializers.CharField()
    product = InventoryProductSerializer()


class InventoryHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = InventoryHistory
        fields = [
            "id",
            "product_id",
            "quantity",
            "final_quantity",
            "importer_name",
            "imported_at",
            "note",
            "reference_id",
        ]
        read_only_fields = fields


class InventoryQuantityUpdateSerializer(serializers.Serializer):
    """Signed change: positive adds stock, negative removes it."""

    quantity = serializers.IntegerField()
    version = serializers.CharField(max_length=36)
    note = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_quantity(self, value: int) -> int:
        if value == 0:
            raise serializers.ValidationError("Quantity change must not be zero")
        return value


# EOF
