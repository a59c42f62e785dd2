"""Product endpoints: list the catalog and create products with their inventory row."""

from common.db import translate_db_errors
from django_filters import rest_framework as filters
from drf_spectacular.utils import OpenApiExample, extend_schema, extend_schema_view
from rest_framework import filters as drf_filters
from rest_framework import generics, status
from rest_framework.response import Response

from . import selectors, services
from .models import Product
from .serializers import ProductCreateSerializer, ProductSerializer


class ProductFilterSet(filters.FilterSet):
    type = filters.CharFilter(field_name="type", lookup_expr="iexact")

    class Meta:
        model = Product
        fields = ["type"]


@extend_schema_view(
    get=extend_schema(
        summary="List products",
        description="Products ordered by id. Filter by `type`, search by `q` on name.",
        tags=["Catalog Endpoints"],
    ),
)
class ProductListCreateView(generics.ListAPIView):
    serializer_class = ProductSerializer
    filterset_class = ProductFilterSet
    throttle_scope = "catalog"

    class QSearchFilter(drf_filters.SearchFilter):
        search_param = "q"

    filter_backends = [filters.DjangoFilterBackend, drf_filters.OrderingFilter, QSearchFilter]
    ordering_fields = ["name", "original_price", "id"]
    search_fields = ["name"]

    def get_queryset(self):
        return selectors.list_products()

    def list(self, request, *args, **kwargs):
        with translate_db_errors("catalog.list_products"):
            return super().list(request, *args, **kwargs)

    @extend_schema(
        summary="Create product",
        description="Creates the product and its inventory row (quantity 0, fresh version) in one transaction.",
        tags=["Catalog Endpoints"],
        request=ProductCreateSerializer,
        responses={201: ProductSerializer},
        examples=[
            OpenApiExample(
                "Create",
                value={"name": "Tile 60x60", "spec": 4, "type": "ceramic", "original_price": 120000},
                request_only=True,
            )
        ],
    )
    def post(self, request, *args, **kwargs):
        ser = ProductCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        product = services.create_product(**ser.validated_data)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)
