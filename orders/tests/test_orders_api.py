import datetime

import pytest
from catalog.tests.factories import ProductFactory
from common.choices import DeliveryStatus
from customer.tests.factories import CustomerFactory
from django.utils import timezone
from inventory import store
from inventory.tests.factories import assert_ledger_balanced, stock
from orders.models import Order
from orders.tests.factories import OrderFactory, OrderImageFactory, OrderItemFactory
from rest_framework.test import APIClient
from users.tests.factories import UserFactory

pytestmark = pytest.mark.django_db


@pytest.fixture
def api_client():
    client = APIClient()
    client.force_authenticate(user=UserFactory(username="cashier"))
    return client


def _payload(customer, *items, **extra):
    return {
        "customer_id": customer.id,
        "order_date": "2025-01-01T09:00:00Z",
        "delivery_status": "PENDING",
        "order_items": list(items),
        **extra,
    }


def test_create_order_returns_read_model(api_client):
    customer = CustomerFactory(name="Hoa")
    product = ProductFactory(name="Wall tile", original_price=100_000)
    version = stock(product, 10).version

    resp = api_client.post(
        "/api/v1/orders/",
        _payload(
            customer,
            {"product_id": product.id, "quantity": 4, "selling_price": 150_000, "version": version, "export_from": "INVENTORY"},
        ),
        format="json",
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["customer"]["name"] == "Hoa"
    assert body["total_original_cost"] == 400_000
    assert body["total_sales_revenue"] == 600_000
    assert body["total_profit_loss"] == 200_000
    assert body["total_profit_loss_percentage"] == 50.0
    assert body["product_count"] == 1
    [line] = body["order_items"]
    assert (line["product_name"], line["export_from"], line["quantity"]) == ("Wall tile", "INVENTORY", 4)
    assert store.get_by_product(product.id).quantity == 6
    assert_ledger_balanced()


def test_create_with_stale_version_is_409(api_client):
    product = ProductFactory()
    stale = stock(product, 5).version
    stock(product, 1)

    resp = api_client.post(
        "/api/v1/orders/",
        _payload(
            CustomerFactory(),
            {"product_id": product.id, "quantity": 1, "selling_price": 10, "version": stale, "export_from": "INVENTORY"},
        ),
        format="json",
    )

    assert resp.status_code == 409
    assert resp.json()["code"] == "INVENTORY_VERSION_MISMATCH"
    assert Order.objects.count() == 0


def test_create_over_stock_and_duplicates_are_rejected(api_client):
    product = ProductFactory()
    version = stock(product, 2).version
    customer = CustomerFactory()

    over = api_client.post(
        "/api/v1/orders/",
        _payload(
            customer,
            {"product_id": product.id, "quantity": 3, "selling_price": 10, "version": version, "export_from": "INVENTORY"},
        ),
        format="json",
    )
    assert over.status_code == 400
    assert over.json()["code"] == "INVENTORY_QUANTITY_EXCEEDED"

    dup = api_client.post(
        "/api/v1/orders/",
        _payload(
            customer,
            {"product_id": product.id, "quantity": 1, "selling_price": 10, "export_from": "EXTERNAL"},
            {"product_id": product.id, "quantity": 2, "selling_price": 10, "export_from": "EXTERNAL"},
        ),
        format="json",
    )
    assert dup.status_code == 400
    assert dup.json()["code"] == "DUPLICATE_ORDER_ITEMS"


def test_create_validation_error_names_nested_field(api_client):
    product = ProductFactory()
    resp = api_client.post(
        "/api/v1/orders/",
        _payload(
            CustomerFactory(),
            {"product_id": product.id, "quantity": 1, "selling_price": 10, "export_from": "EXTERNAL"},
            {"product_id": product.id, "quantity": 1, "selling_price": 10, "export_from": "WAREHOUSE"},
        ),
        format="json",
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "BAD_REQUEST"
    assert resp.json()["field"] == "order_items[1].export_from"


def test_list_filters_and_sort(api_client):
    alice, bob = CustomerFactory(), CustomerFactory()
    now = timezone.now()
    old = OrderFactory(customer=alice, order_date=now - datetime.timedelta(days=3))
    new = OrderFactory(customer=alice, order_date=now, delivery_status=DeliveryStatus.UNPAID)
    OrderFactory(customer=bob, delivery_status=DeliveryStatus.COMPLETED)

    by_customer = api_client.get("/api/v1/orders/", {"customer_id": alice.id, "sort": "order_date_asc"})
    assert by_customer.status_code == 200
    assert [o["id"] for o in by_customer.json()["results"]] == [old.id, new.id]
    assert "order_items" not in by_customer.json()["results"][0]

    by_status = api_client.get("/api/v1/orders/", {"delivery_statuses": "UNPAID,COMPLETED"})
    assert {o["delivery_status"] for o in by_status.json()["results"]} == {"UNPAID", "COMPLETED"}
    assert by_status.json()["count"] == 2


@pytest.mark.parametrize(
    "params, field",
    [
        ({"customer_id": "abc"}, "customer_id"),
        ({"delivery_statuses": "LOST"}, "delivery_statuses"),
        ({"sort": "price"}, "sort"),
    ],
)
def test_list_rejects_bad_filters(api_client, params, field):
    resp = api_client.get("/api/v1/orders/", params)
    assert resp.status_code == 400
    assert resp.json()["field"] == field


def test_detail_includes_profit_and_image_urls(api_client):
    order = OrderFactory(total_original_cost=200, total_sales_revenue=150)
    OrderItemFactory(order=order, quantity=2, selling_price=75, original_price=100)
    image = OrderImageFactory(order=order, storage_key="orders/receipt.jpg")

    resp = api_client.get(f"/api/v1/orders/{order.id}/")

    assert resp.status_code == 200
    body = resp.json()
    assert body["total_profit_loss"] == -50
    assert body["total_profit_loss_percentage"] == -25.0
    assert body["order_items"][0]["profit_loss"] == -50
    assert body["images"] == [
        {"id": image.id, "image_type": image.image_type, "s3_key": "orders/receipt.jpg", "image_url": "/media/orders/receipt.jpg"}
    ]


def test_detail_unknown_order_is_404(api_client):
    resp = api_client.get("/api/v1/orders/99999/")
    assert resp.status_code == 404
    assert resp.json()["field"] == "order_id"


def test_update_then_delete_restores_stock(api_client):
    product = ProductFactory()
    version = stock(product, 5).version
    created = api_client.post(
        "/api/v1/orders/",
        _payload(
            CustomerFactory(),
            {"product_id": product.id, "quantity": 5, "selling_price": 10, "version": version, "export_from": "INVENTORY"},
        ),
        format="json",
    ).json()
    url = f"/api/v1/orders/{created['id']}/"

    updated = api_client.put(url, {"delivery_status": "DELIVERED", "debt_status": "PARTIAL"}, format="json")
    assert updated.status_code == 200
    assert updated.json()["delivery_status"] == "DELIVERED"
    assert updated.json()["debt_status"] == "PARTIAL"

    deleted = api_client.delete(url)
    assert deleted.status_code == 204
    assert store.get_by_product(product.id).quantity == 5
    assert api_client.get(url).status_code == 404
    assert_ledger_balanced()


def test_dashboard_stats(api_client, settings):
    settings.INVENTORY_LOW_STOCK_THRESHOLD = 10
    stock(ProductFactory(), 4)
    stock(ProductFactory(), 30)
    CustomerFactory()
    OrderFactory(delivery_status=DeliveryStatus.COMPLETED)
    OrderFactory()

    resp = api_client.get("/api/v1/statistics/dashboard/")

    assert resp.status_code == 200
    assert resp.json() == {
        "total_products": 2,
        "total_customers": 3,
        "total_inventory_items": 34,
        "low_stock_products": 1,
        "total_orders": 2,
        "pending_orders": 1,
    }


def test_anonymous_requests_are_401():
    resp = APIClient().get("/api/v1/orders/")
    assert resp.status_code == 401
    assert resp.json()["code"] == "UNAUTHORIZED"
