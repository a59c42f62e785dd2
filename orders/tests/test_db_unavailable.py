from unittest.mock import patch

import pytest
from catalog.selectors import get_products_by_ids
from catalog.tests.factories import ProductFactory
from common.errors import DbDownError
from customer.tests.factories import CustomerFactory
from django.db import OperationalError
from django.utils import timezone
from inventory import store
from inventory.services import update_quantity
from orders.models import Order
from orders.services import CreateOrderCommand, create_order, delete_order
from orders.tests.factories import OrderItemFactory, external_line
from rest_framework.test import APIClient
from users.tests.factories import UserFactory

pytestmark = pytest.mark.django_db

CONNECTION_LOST = OperationalError("server closed the connection")


def test_actor_lookup_failure_is_db_down():
    user = UserFactory()
    product = ProductFactory()
    version = store.get_by_product(product.id).version

    with patch("users.selectors.User.objects.get", side_effect=CONNECTION_LOST):
        with pytest.raises(DbDownError):
            update_quantity(actor_id=user.id, product_id=product.id, delta=1, version=version)
    assert store.get_by_product(product.id).quantity == 0


def test_customer_lookup_failure_is_db_down():
    user = UserFactory()
    command = CreateOrderCommand(
        customer_id=CustomerFactory().id, order_date=timezone.now(), lines=[external_line(ProductFactory(), 1)]
    )

    with patch("customer.selectors.Customer.objects.get", side_effect=CONNECTION_LOST):
        with pytest.raises(DbDownError):
            create_order(actor_id=user.id, command=command)
    assert Order.objects.count() == 0


def test_product_lookup_failure_is_db_down():
    product = ProductFactory()
    with patch("catalog.selectors.Product.objects.using", side_effect=CONNECTION_LOST):
        with pytest.raises(DbDownError):
            get_products_by_ids([product.id])


def test_delete_lookup_failure_is_db_down():
    user = UserFactory()
    item = OrderItemFactory()

    with patch("orders.services.Order.objects.get", side_effect=CONNECTION_LOST):
        with pytest.raises(DbDownError):
            delete_order(actor_id=user.id, order_id=item.order_id)
    assert Order.objects.filter(id=item.order_id).exists()


def test_order_reads_answer_503():
    client = APIClient()
    client.force_authenticate(user=UserFactory())
    item = OrderItemFactory()

    with patch("orders.selectors.Order.objects.select_related", side_effect=CONNECTION_LOST):
        detail = client.get(f"/api/v1/orders/{item.order_id}/")
        listing = client.get("/api/v1/orders/")

    for resp in (detail, listing):
        assert resp.status_code == 503
        assert resp.json()["code"] == "DB_DOWN"
