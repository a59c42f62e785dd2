import pytest
from catalog.models import Product
from catalog.services import create_product
from catalog.tests.factories import ProductFactory
from common.errors import BadRequestError
from inventory import store
from inventory.models import InventoryHistory
from rest_framework.test import APIClient
from users.tests.factories import UserFactory

pytestmark = pytest.mark.django_db


@pytest.fixture
def api_client():
    client = APIClient()
    client.force_authenticate(user=UserFactory())
    return client


def test_create_product_opens_empty_inventory():
    product = create_product(name="  Granite 80x80 ", original_price=250_000, spec=2, type="granite")

    assert product.name == "Granite 80x80"
    inventory = store.get_by_product(product.id)
    assert inventory.quantity == 0
    assert len(inventory.version) == 36
    assert not InventoryHistory.objects.filter(product=product).exists()


@pytest.mark.parametrize("kwargs, field", [({"name": " "}, "name"), ({"original_price": -1}, "original_price")])
def test_create_product_rejects_bad_input(kwargs, field):
    data = {"name": "Tile", "original_price": 10, **kwargs}
    with pytest.raises(BadRequestError) as exc_info:
        create_product(**data)
    assert exc_info.value.field == field
    assert Product.objects.count() == 0


def test_post_product(api_client):
    resp = api_client.post(
        "/api/v1/products/", {"name": "Tile 60x60", "spec": 4, "type": "ceramic", "original_price": 120_000}, format="json"
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["name"] == "Tile 60x60"
    assert store.get_by_product(body["id"]).quantity == 0


def test_post_product_validation_error(api_client):
    resp = api_client.post("/api/v1/products/", {"name": "Tile"}, format="json")
    assert resp.status_code == 400
    assert resp.json()["code"] == "BAD_REQUEST"
    assert resp.json()["field"] == "original_price"


def test_list_products_filters_and_search(api_client):
    ProductFactory(name="Blue mosaic", type="mosaic")
    ProductFactory(name="White ceramic", type="ceramic")
    ProductFactory(name="Grey ceramic", type="Ceramic")

    by_type = api_client.get("/api/v1/products/", {"type": "ceramic", "ordering": "name"})
    assert by_type.status_code == 200
    assert [p["name"] for p in by_type.json()["results"]] == ["Grey ceramic", "White ceramic"]

    searched = api_client.get("/api/v1/products/", {"q": "mosaic"})
    assert [p["name"] for p in searched.json()["results"]] == ["Blue mosaic"]
