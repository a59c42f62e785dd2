"""Orders API endpoints.

Thin adapters: requests are validated into commands, handed to
``orders.services`` and answered with the read model from
``orders.selectors``. Service errors are rendered by
``common.exceptions.exception_handler``.
"""

from common.db import translate_db_errors
from common.errors import BadRequestError
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework.views import APIView

from . import selectors, services
from .serializers import CreateOrderSerializer, DashboardStatsSerializer, OrderViewSerializer, UpdateOrderSerializer
from .statistics import dashboard_stats


class DefaultPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"


def _actor_id(request):
    return getattr(request.user, "id", None)


class OrderListCreateView(generics.GenericAPIView):
    """List orders with filters, or create a new order.

    Filters:
    - `customer_id`: exact customer
    - `delivery_statuses`: comma separated delivery statuses
    - `sort`: `order_date_asc` or `order_date_desc` (default newest id first)
    """

    serializer_class = OrderViewSerializer
    pagination_class = DefaultPagination
    throttle_scope = "orders"
    filter_backends = []

    def get_queryset(self):
        params = self.request.query_params
        statuses = params.get("delivery_statuses")
        customer_id = params.get("customer_id")
        if customer_id and not customer_id.isdigit():
            raise BadRequestError("customer_id must be an integer", field="customer_id")
        return selectors.list_orders(
            customer_id=int(customer_id) if customer_id else None,
            delivery_statuses=statuses.split(",") if statuses else None,
            sort=params.get("sort") or None,
        )

    @extend_schema(
        tags=["Orders"],
        summary="List orders",
        parameters=[
            OpenApiParameter(name="customer_id", required=False, type=int),
            OpenApiParameter(name="delivery_statuses", description="e.g. PENDING,UNPAID", required=False, type=str),
            OpenApiParameter(name="sort", description="order_date_asc | order_date_desc", required=False, type=str),
        ],
        responses={200: OrderViewSerializer(many=True)},
    )
    def get(self, request, *args, **kwargs):
        with translate_db_errors("orders.list"):
            page = self.paginate_queryset(self.get_queryset())
            rows = [selectors.build_order_view(order, with_items=False) for order in page]
        return self.get_paginated_response(OrderViewSerializer(rows, many=True).data)

    @extend_schema(
        tags=["Orders"],
        summary="Create order",
        description=(
            "Creates the order and deducts stock for INVENTORY lines in one transaction. "
            "Each INVENTORY line must carry the inventory `version` the client last read."
        ),
        request=CreateOrderSerializer,
        responses={201: OrderViewSerializer},
        examples=[
            OpenApiExample(
                "Create",
                value={
                    "customer_id": 1,
                    "order_date": "2025-01-01T09:00:00Z",
                    "delivery_status": "PENDING",
                    "order_items": [
                        {
                            "product_id": 10,
                            "quantity": 5,
                            "selling_price": 150000,
                            "discount": 0,
                            "version": "5f0c6e4e-0d43-4c55-9b8e-0b8f3bd0b2a4",
                            "export_from": "INVENTORY",
                        }
                    ],
                },
                request_only=True,
            ),
            OpenApiExample(
                "Version mismatch",
                value={
                    "code": "INVENTORY_VERSION_MISMATCH",
                    "message": "Inventory was modified by another request. Refetch and try again",
                    "field": "version",
                },
                response_only=True,
                status_codes=["409"],
            ),
        ],
    )
    def post(self, request, *args, **kwargs):
        ser = CreateOrderSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        order = services.create_order(actor_id=_actor_id(request), command=ser.to_command())
        view = selectors.build_order_view(selectors.get_order(order.id))
        return Response(OrderViewSerializer(view).data, status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    throttle_scope = "orders"

    @extend_schema(tags=["Orders"], summary="Get order detail", responses={200: OrderViewSerializer})
    def get(self, request, order_id: int):
        view = selectors.build_order_view(selectors.get_order(order_id))
        return Response(OrderViewSerializer(view).data)

    @extend_schema(
        tags=["Orders"],
        summary="Update order",
        description="Updates order metadata. Changing delivery_status stamps status_transitioned_at.",
        request=UpdateOrderSerializer,
        responses={200: OrderViewSerializer},
    )
    def put(self, request, order_id: int):
        ser = UpdateOrderSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        services.update_order(actor_id=_actor_id(request), order_id=order_id, **ser.validated_data)
        view = selectors.build_order_view(selectors.get_order(order_id))
        return Response(OrderViewSerializer(view).data)

    @extend_schema(
        tags=["Orders"],
        summary="Delete order",
        description="Deletes the order and returns INVENTORY-sourced quantities to stock.",
        responses={204: None},
    )
    def delete(self, request, order_id: int):
        services.delete_order(actor_id=_actor_id(request), order_id=order_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class DashboardStatsView(APIView):
    @extend_schema(tags=["Statistics"], summary="Dashboard statistics", responses={200: DashboardStatsSerializer})
    def get(self, request):
        with translate_db_errors("orders.dashboard_stats"):
            stats = dashboard_stats()
        return Response(DashboardStatsSerializer(stats).data)
