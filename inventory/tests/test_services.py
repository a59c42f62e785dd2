import threading
from typing import List

import pytest
from catalog.tests.factories import ProductFactory
from common.errors import (
    BadRequestError,
    NotFoundError,
    QuantityNegativeError,
    UnauthorizedError,
    VersionMismatchError,
)
from django.db import close_old_connections, connection
from inventory import store
from inventory.models import InventoryHistory
from inventory.services import update_quantity
from inventory.tests.factories import assert_ledger_balanced
from users.tests.factories import UserFactory


@pytest.mark.django_db
def test_update_quantity_adds_stock_and_logs_actor():
    user = UserFactory(username="warehouse")
    product = ProductFactory()
    before = store.get_by_product(product.id)

    after = update_quantity(actor_id=user.id, product_id=product.id, delta=12, version=before.version, note="Import")

    assert after.quantity == 12
    assert after.version != before.version
    entry = InventoryHistory.objects.get(product=product)
    assert entry.quantity == 12
    assert entry.final_quantity == 12
    assert entry.importer_name == "warehouse"
    assert entry.note == "Import"
    assert entry.reference_id is None
    assert_ledger_balanced()


@pytest.mark.django_db
def test_update_quantity_removes_stock():
    user = UserFactory()
    product = ProductFactory()
    v1 = update_quantity(actor_id=user.id, product_id=product.id, delta=10, version=store.get_by_product(product.id).version)
    v2 = update_quantity(actor_id=user.id, product_id=product.id, delta=-4, version=v1.version)
    assert v2.quantity == 6
    assert_ledger_balanced()


@pytest.mark.django_db
def test_two_writers_with_the_same_version_only_one_wins():
    user = UserFactory()
    product = ProductFactory()
    seen = store.get_by_product(product.id).version

    update_quantity(actor_id=user.id, product_id=product.id, delta=5, version=seen)
    with pytest.raises(VersionMismatchError) as exc_info:
        update_quantity(actor_id=user.id, product_id=product.id, delta=7, version=seen)

    assert exc_info.value.field == "version"
    assert store.get_by_product(product.id).quantity == 5
    assert InventoryHistory.objects.filter(product=product).count() == 1
    assert_ledger_balanced()


@pytest.mark.django_db
def test_removing_more_than_on_hand_fails_without_writing():
    user = UserFactory()
    product = ProductFactory()
    current = update_quantity(
        actor_id=user.id, product_id=product.id, delta=3, version=store.get_by_product(product.id).version
    )

    with pytest.raises(QuantityNegativeError):
        update_quantity(actor_id=user.id, product_id=product.id, delta=-4, version=current.version)

    unchanged = store.get_by_product(product.id)
    assert unchanged.quantity == 3
    assert unchanged.version == current.version
    assert InventoryHistory.objects.filter(product=product).count() == 1


@pytest.mark.django_db
def test_update_quantity_input_errors():
    user = UserFactory()
    product = ProductFactory()
    version = store.get_by_product(product.id).version

    with pytest.raises(UnauthorizedError):
        update_quantity(actor_id=None, product_id=product.id, delta=1, version=version)
    with pytest.raises(BadRequestError) as zero:
        update_quantity(actor_id=user.id, product_id=product.id, delta=0, version=version)
    assert zero.value.field == "quantity"
    with pytest.raises(BadRequestError) as missing:
        update_quantity(actor_id=user.id, product_id=product.id, delta=1, version="")
    assert missing.value.field == "version"
    with pytest.raises(NotFoundError):
        update_quantity(actor_id=user.id, product_id=999_999, delta=1, version=version)
    assert InventoryHistory.objects.count() == 0


@pytest.mark.django_db
def test_inactive_actor_is_rejected():
    user = UserFactory(is_active=False)
    product = ProductFactory()
    with pytest.raises(UnauthorizedError):
        update_quantity(
            actor_id=user.id, product_id=product.id, delta=1, version=store.get_by_product(product.id).version
        )


def _update_worker(barrier, user_id, product_id, version, delta, successes: List[int], errors: List[Exception]):
    close_old_connections()
    barrier.wait()
    try:
        update_quantity(actor_id=user_id, product_id=product_id, delta=delta, version=version)
        successes.append(delta)
    except Exception as exc:
        errors.append(exc)
    finally:
        connection.close()


@pytest.mark.django_db(transaction=True)
def test_threaded_updates_with_same_version():
    if connection.vendor == "sqlite":
        pytest.skip("SQLite lacks real concurrent transactions; skipping threaded test.")
    user = UserFactory()
    product = ProductFactory()
    version = store.get_by_product(product.id).version

    barrier = threading.Barrier(2)
    successes: List[int] = []
    errors: List[Exception] = []
    threads = [
        threading.Thread(target=_update_worker, args=(barrier, user.id, product.id, version, delta, successes, errors))
        for delta in (4, 9)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(successes) == 1
    assert len(errors) == 1
    assert isinstance(errors[0], VersionMismatchError)
    assert store.get_by_product(product.id).quantity == successes[0]
    assert_ledger_balanced()
