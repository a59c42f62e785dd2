import pytest
from catalog.tests.factories import ProductFactory
from django.core.management import call_command
from django.core.management.base import CommandError
from inventory.models import Inventory
from inventory.tests.factories import stock

pytestmark = pytest.mark.django_db


def test_ledger_check_passes_when_balanced(capsys):
    stock(ProductFactory(), 9)
    call_command("check_inventory_ledger")
    assert "consistent" in capsys.readouterr().out


def test_ledger_check_reports_drift():
    product = ProductFactory()
    stock(product, 9)
    # simulate an out-of-band write that skipped the history log
    Inventory.objects.filter(product=product).update(quantity=11)

    with pytest.raises(CommandError):
        call_command("check_inventory_ledger")
