import datetime

import pytest
from common.choices import DeliveryStatus
from django.contrib import admin
from django.test import RequestFactory
from django.utils import timezone
from orders.models import Order
from orders.tests.factories import OrderFactory
from users.tests.factories import UserFactory

pytestmark = pytest.mark.django_db


@pytest.fixture
def admin_request():
    request = RequestFactory().post("/admin/orders/order/")
    request.user = UserFactory(is_staff=True, is_superuser=True)
    return request


def test_admin_status_change_stamps_transition_time(admin_request):
    earlier = timezone.now() - datetime.timedelta(days=1)
    order = OrderFactory(status_transitioned_at=earlier)
    order.delivery_status = DeliveryStatus.DELIVERED
    order.debt_status = "PAID"

    admin.site._registry[Order].save_model(admin_request, order, form=None, change=True)

    order.refresh_from_db()
    assert order.delivery_status == DeliveryStatus.DELIVERED
    assert order.debt_status == "PAID"
    assert order.status_transitioned_at > earlier


def test_admin_save_without_status_change_keeps_transition_time(admin_request):
    earlier = timezone.now() - datetime.timedelta(days=1)
    order = OrderFactory(status_transitioned_at=earlier)
    order.additional_cost_note = "Crane rental"

    admin.site._registry[Order].save_model(admin_request, order, form=None, change=True)

    order.refresh_from_db()
    assert order.additional_cost_note == "Crane rental"
    assert order.status_transitioned_at == earlier
