"""Unit of work and session handles for repository calls.

Repository functions never open transactions on their own: every call takes
an explicit ``Session``. ``Session.autonomous()`` runs each statement in
autocommit mode; a session returned by ``UnitOfWork.begin()`` shares one
database transaction across every call it is passed to.
"""

import logging
import math
from contextlib import contextmanager
from typing import Iterator, Optional

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, DatabaseError, InterfaceError, OperationalError, connections, transaction

from .errors import DbDownError

logger = logging.getLogger("tradeflow.db")


class Session:
    """Handle identifying the connection (and transaction, if any) to use."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS, atomic: Optional[transaction.Atomic] = None):
        self.using = using
        self._atomic = atomic
        self.released = False

    @classmethod
    def autonomous(cls, using: str = DEFAULT_DB_ALIAS) -> "Session":
        return cls(using=using)

    @property
    def in_transaction(self) -> bool:
        return self._atomic is not None

    def require_transaction(self) -> None:
        """Guard for operations that only make sense under a row lock."""
        if not self.in_transaction:
            raise RuntimeError("This operation requires a session obtained from UnitOfWork.begin()")
        if self.released:
            raise RuntimeError("Session was already committed or rolled back")

    def __repr__(self) -> str:  # pragma: no cover
        kind = "transaction" if self.in_transaction else "autonomous"
        return f"Session<{self.using} {kind}>"


class UnitOfWork:
    """Begin/commit/rollback wrapper around one relational transaction."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def begin(self) -> Session:
        atomic = transaction.atomic(using=self.using)
        try:
            atomic.__enter__()
        except (OperationalError, InterfaceError) as exc:
            logger.error("uow.begin_failed", extra={"event": "uow.begin_failed", "error": str(exc)})
            raise DbDownError() from exc
        session = Session(using=self.using, atomic=atomic)
        try:
            self._bound_lock_wait(session)
        except DatabaseError as exc:
            self.rollback(session)
            raise DbDownError() from exc
        return session

    def commit(self, session: Session) -> None:
        self._release(session)
        doomed = transaction.get_rollback(using=session.using)
        try:
            session._atomic.__exit__(None, None, None)
        except DatabaseError as exc:
            logger.error("uow.commit_failed", extra={"event": "uow.commit_failed", "error": str(exc)})
            raise DbDownError() from exc
        if doomed:
            # Django rolled back instead of committing
            raise DbDownError("Transaction was aborted and could not be committed")

    def rollback(self, session: Session) -> None:
        """Roll back; a failure here is logged and never replaces the original error."""
        self._release(session)
        try:
            transaction.set_rollback(True, using=session.using)
            session._atomic.__exit__(None, None, None)
        except DatabaseError as exc:
            logger.error("uow.rollback_failed", extra={"event": "uow.rollback_failed", "error": str(exc)})

    @contextmanager
    def atomic(self) -> Iterator[Session]:
        """Yield a transactional session; commit on success, roll back on any exception."""
        session = self.begin()
        try:
            yield session
        except BaseException:
            self.rollback(session)
            raise
        self.commit(session)

    def _release(self, session: Session) -> None:
        if not session.in_transaction:
            raise RuntimeError("Autonomous sessions have nothing to commit or roll back")
        if session.released:
            raise RuntimeError("Session was already committed or rolled back")
        session.released = True

    def _bound_lock_wait(self, session: Session) -> None:
        timeout_ms = int(getattr(settings, "INVENTORY_LOCK_TIMEOUT_MS", 0) or 0)
        if timeout_ms <= 0:
            return
        connection = connections[session.using]
        if connection.vendor == "postgresql":
            with connection.cursor() as cursor:
                cursor.execute("SELECT set_config('lock_timeout', %s, true)", [f"{timeout_ms}ms"])
        elif connection.vendor == "mysql":
            seconds = max(1, math.ceil(timeout_ms / 1000))
            with connection.cursor() as cursor:
                cursor.execute(f"SET SESSION innodb_lock_wait_timeout = {seconds:d}")
        # SQLite serializes writers itself; nothing to configure


@contextmanager
def translate_db_errors(operation: str) -> Iterator[None]:
    """Turn transport-level database failures into DbDownError."""
    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        logger.error("db.unavailable", extra={"event": "db.unavailable", "operation": operation, "error": str(exc)})
        raise DbDownError() from exc
