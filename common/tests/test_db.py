import logging
from unittest.mock import MagicMock, patch

import pytest
from common.db import Session, UnitOfWork, translate_db_errors
from common.errors import DbDownError
from customer.models import Customer
from django.db import DatabaseError, OperationalError, transaction

pytestmark = pytest.mark.django_db


def test_commit_persists_writes():
    uow = UnitOfWork()
    session = uow.begin()
    Customer.objects.using(session.using).create(name="Committed")
    uow.commit(session)

    assert Customer.objects.filter(name="Committed").exists()
    assert session.released


def test_rollback_discards_writes():
    uow = UnitOfWork()
    session = uow.begin()
    Customer.objects.using(session.using).create(name="Discarded")
    uow.rollback(session)

    assert not Customer.objects.filter(name="Discarded").exists()


def test_session_released_only_once():
    uow = UnitOfWork()
    session = uow.begin()
    uow.commit(session)

    with pytest.raises(RuntimeError):
        uow.commit(session)
    with pytest.raises(RuntimeError):
        uow.rollback(session)


def test_autonomous_session_cannot_lock_or_commit():
    session = Session.autonomous()
    assert not session.in_transaction
    with pytest.raises(RuntimeError):
        session.require_transaction()
    with pytest.raises(RuntimeError):
        UnitOfWork().commit(session)


def test_atomic_rolls_back_and_reraises_original_error():
    uow = UnitOfWork()
    with pytest.raises(KeyError):
        with uow.atomic() as session:
            Customer.objects.using(session.using).create(name="Half done")
            raise KeyError("boom")

    assert not Customer.objects.filter(name="Half done").exists()


def test_rollback_failure_is_logged_not_raised(caplog):
    uow = UnitOfWork()
    session = uow.begin()
    atomic = session._atomic
    with caplog.at_level(logging.ERROR, logger="tradeflow.db"):
        with patch.object(atomic, "__exit__", side_effect=DatabaseError("connection lost")):
            uow.rollback(session)

    assert any(r.getMessage() == "uow.rollback_failed" for r in caplog.records)
    # release the savepoint the failed rollback left open
    atomic.__exit__(None, None, None)


def test_begin_failure_maps_to_db_down():
    broken = MagicMock()
    broken.__enter__.side_effect = OperationalError("could not connect")
    with patch("common.db.transaction.atomic", return_value=broken):
        with pytest.raises(DbDownError):
            UnitOfWork().begin()


def test_commit_of_doomed_transaction_raises_db_down():
    uow = UnitOfWork()
    session = uow.begin()
    Customer.objects.using(session.using).create(name="Doomed")
    transaction.set_rollback(True, using=session.using)

    with pytest.raises(DbDownError):
        uow.commit(session)
    assert not Customer.objects.filter(name="Doomed").exists()


def test_translate_db_errors():
    with pytest.raises(DbDownError) as exc_info:
        with translate_db_errors("probe"):
            raise OperationalError("lock timeout")
    assert exc_info.value.retryable

    # other errors pass through untouched
    with pytest.raises(ValueError):
        with translate_db_errors("probe"):
            raise ValueError("not a db error")
