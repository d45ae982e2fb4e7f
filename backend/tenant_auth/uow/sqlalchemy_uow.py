"""
SQLAlchemy implementations of the Unit of Work over the Flask-scoped session.
"""

from __future__ import annotations

from contextlib import suppress
from typing import Any

from flask import current_app
from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from tenant_auth.core.extensions import db
from tenant_auth.repositories import (
    RefreshSessionRepository,
    TenantRepository,
    UserRepository,
)
from tenant_auth.uow.base import UnitOfWork

ISOLATION_LEVELS = frozenset(
    {"READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE", "READ UNCOMMITTED"}
)


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.tenants = TenantRepository(session=self.session)
        self.refresh_sessions = RefreshSessionRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-write UoW: commit on clean exit, roll back on any exception.

    The session begins lazily on the first statement.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only UoW over the Flask-scoped session.

    On entry it tries to own a fresh transaction. When it does, it applies the
    requested isolation level and ``SET TRANSACTION READ ONLY`` on engines that
    understand them (PostgreSQL, MySQL/MariaDB) and rolls back on exit. When a
    transaction is already open (an enclosing unit of work, or rows a caller
    flushed earlier) it attaches to it and leaves it untouched on exit.

    Either way two guards stay installed for the duration of the block: a
    ``before_flush`` hook rejecting pending ORM changes and a
    ``before_cursor_execute`` hook rejecting DML/DDL. Both raise
    :class:`RuntimeError`. ``commit()`` is never allowed.

    :param isolation_level: e.g. ``"READ COMMITTED"``; ``None`` keeps the
        connection default. Ignored on SQLite.
    :param enforce_db_readonly: Issue ``SET TRANSACTION READ ONLY`` when supported.
    """

    _WRITE_PREFIXES = (
        "insert",
        "update",
        "delete",
        "merge",
        "alter",
        "drop",
        "truncate",
        "create",
        "replace",
        "grant",
        "revoke",
    )

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(session=db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._conn: Connection | None = None
        self._txn: SessionTransaction | None = None
        self._flush_guard: Any = None
        self._cursor_guard: Any = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._txn = None
        try:
            txn = self.session.begin()
            txn.__enter__()
            self._txn = txn
        except InvalidRequestError:
            # Already inside a transaction: attach without SET TRANSACTION
            pass

        self._conn = self.session.connection()
        self._install_guards()
        if self._txn is not None:
            self._apply_transaction_settings(self._conn.dialect.name)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._txn is not None:
                with suppress(SQLAlchemyError):
                    self.session.rollback()
                try:
                    self._txn.__exit__(exc_type, exc, tb)
                finally:
                    self._txn = None
        finally:
            self._remove_guards()
            self._conn = None

    def commit(self) -> None:
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ------------------------------------------------------------------ #
    # Transaction settings
    # ------------------------------------------------------------------ #

    def _apply_transaction_settings(self, dialect: str) -> None:
        try:
            if self.isolation_level and dialect != "sqlite":
                iso = self.isolation_level.upper().strip()
                if iso not in ISOLATION_LEVELS:
                    current_app.logger.warning("uow.unknown_isolation", extra={"level": iso})
                self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {iso}"))
            if self.enforce_db_readonly and dialect in ("postgresql", "mysql", "mariadb"):
                self.session.execute(text("SET TRANSACTION READ ONLY"))
        except SQLAlchemyError as exc:
            current_app.logger.warning("uow.set_transaction_failed", extra={"error": str(exc)})

    # ------------------------------------------------------------------ #
    # Guards
    # ------------------------------------------------------------------ #

    def _install_guards(self) -> None:
        if self._flush_guard is not None:
            return

        def _before_flush(session, flush_context, instances):
            if session.new or session.dirty or session.deleted:
                raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")

        def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            verb = statement.lstrip().split(None, 1)[0].lower() if statement else ""
            if verb.startswith(self._WRITE_PREFIXES):
                raise RuntimeError(f"Read-only UnitOfWork: SQL statement blocked: {verb.upper()}")

        event.listen(self.session, "before_flush", _before_flush)
        event.listen(self._guard_target(), "before_cursor_execute", _before_cursor_execute)
        self._flush_guard = _before_flush
        self._cursor_guard = _before_cursor_execute

    def _remove_guards(self) -> None:
        if self._flush_guard is None:
            return
        with suppress(InvalidRequestError):
            event.remove(self.session, "before_flush", self._flush_guard)
        with suppress(InvalidRequestError):
            event.remove(self._guard_target(), "before_cursor_execute", self._cursor_guard)
        self._flush_guard = None
        self._cursor_guard = None

    def _guard_target(self) -> Any:
        return self._conn if self._conn is not None else self.session.get_bind()
