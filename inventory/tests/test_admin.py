import pytest
from django.contrib import admin
from django.test import RequestFactory
from inventory.models import Inventory, InventoryHistory
from users.tests.factories import UserFactory


@pytest.mark.django_db
@pytest.mark.parametrize("model", [Inventory, InventoryHistory])
def test_stock_rows_cannot_be_added_or_deleted_in_admin(model):
    request = RequestFactory().get("/admin/")
    request.user = UserFactory(is_staff=True, is_superuser=True)
    model_admin = admin.site._registry[model]

    assert model_admin.has_add_permission(request) is False
    assert model_admin.has_delete_permission(request) is False
