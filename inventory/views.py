"""Inventory read views and the manual quantity adjustment endpoint."""

from common.db import translate_db_errors
from django_filters import rest_framework as filters
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import generics
from rest_framework.response import Response
from rest_framework.views import APIView

from . import selectors, services, store
from .models import InventoryHistory
from .serializers import (
    InventoryHistorySerializer,
    InventoryQuantityUpdateSerializer,
    InventorySerializer,
    InventoryWithProductSerializer,
)


class InventoryListView(APIView):
    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="List inventories",
        description="Current stock of every product together with basic product info.",
        responses={200: InventoryWithProductSerializer(many=True)},
        examples=[
            OpenApiExample(
                "Inventories",
                value=[
                    {
                        "id": 1,
                        "product_id": 10,
                        "quantity": 42,
                        "version": "5f0c6e4e-0d43-4c55-9b8e-0b8f3bd0b2a4",
                        "product": {"id": 10, "name": "Tile 60x60", "spec": 4, "original_price": 120000},
                    }
                ],
            )
        ],
    )
    def get(self, request):
        with translate_db_errors("inventory.list"):
            rows = [selectors.inventory_with_product(inv) for inv in selectors.list_inventories()]
        return Response(InventoryWithProductSerializer(rows, many=True).data)


class ProductInventoryView(APIView):
    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Get product inventory",
        description="Unlocked read of a product's stock and its current version token.",
        responses={200: InventorySerializer},
    )
    def get(self, request, product_id: int):
        inventory = store.get_by_product(product_id)
        return Response(InventorySerializer(inventory).data)


class InventoryQuantityView(APIView):
    throttle_scope = "inventory_write"

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Adjust product stock",
        description=(
            "Apply a signed quantity change. `version` must be the token from the last read; "
            "a stale token returns 409 INVENTORY_VERSION_MISMATCH."
        ),
        request=InventoryQuantityUpdateSerializer,
        responses={200: InventorySerializer},
        examples=[
            OpenApiExample(
                "Add stock",
                value={"quantity": 20, "version": "5f0c6e4e-0d43-4c55-9b8e-0b8f3bd0b2a4", "note": "Import batch"},
                request_only=True,
            )
        ],
    )
    def put(self, request, product_id: int):
        ser = InventoryQuantityUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        inventory = services.update_quantity(
            actor_id=getattr(request.user, "id", None),
            product_id=product_id,
            delta=ser.validated_data["quantity"],
            version=ser.validated_data["version"],
            note=ser.validated_data.get("note", ""),
        )
        return Response(InventorySerializer(inventory).data)


class InventoryHistoryFilterSet(filters.FilterSet):
    imported_after = filters.IsoDateTimeFilter(field_name="imported_at", lookup_expr="gte")
    imported_before = filters.IsoDateTimeFilter(field_name="imported_at", lookup_expr="lte")
    reference_id = filters.NumberFilter(field_name="reference_id")

    class Meta:
        model = InventoryHistory
        fields = ["imported_after", "imported_before", "reference_id"]


class InventoryHistoryListView(generics.ListAPIView):
    serializer_class = InventoryHistorySerializer
    filterset_class = InventoryHistoryFilterSet
    filter_backends = [filters.DjangoFilterBackend]
    throttle_scope = "inventory"

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="List inventory history",
        description=(
            "Every quantity change recorded for a product, newest first. "
            "Filters: imported_after, imported_before (ISO), reference_id (order id)."
        ),
    )
    def get(self, request, *args, **kwargs):
        store.get_by_product(self.kwargs["product_id"])
        with translate_db_errors("inventory.list_histories"):
            return super().get(request, *args, **kwargs)

    def get_queryset(self):
        return selectors.list_histories(self.kwargs["product_id"])


# EOF
