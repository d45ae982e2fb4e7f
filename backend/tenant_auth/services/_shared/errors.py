"""
Exceptions raised by services, repositories and token/session adapters.

Nothing here knows about HTTP. :func:`tenant_auth.core.errors.from_service_error`
decides which status each one becomes.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Tell whether ``exc`` was caused by the named unique constraint.

    PostgreSQL reports the constraint name; SQLite only reports
    ``table.column``, which is recovered from the ``uq_<table>_<column>``
    naming convention.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    if constraint_name.lower() in message:
        return True
    _, _, rest = constraint_name.partition("_")
    table, _, column = rest.partition("_")
    return f"{table}.{column}" in message


class ServiceError(Exception):
    """Root of every service-layer failure."""


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """No ``entity`` row matches ``key``."""

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """A write collided with existing data, e.g. a taken email."""

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class AuthError(ServiceError):
    """
    Raised when credentials do not match a user.

    The message never reveals whether the email or the password was wrong.
    """

    def __init__(self, message: str = "Email or password not match") -> None:
        super().__init__(message)


class InvalidTokenError(ServiceError):
    """
    Raised for any token that cannot be trusted.

    Covers bad signatures, wrong algorithms, malformed or expired tokens,
    missing or unknown claims and refresh sessions that are no longer active.
    """

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class ForbiddenError(ServiceError):
    """Raised when an authenticated principal's role is not allowed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class PersistenceError(ServiceError):
    """
    Raised when a storage backend (database, Redis) fails.

    The driver exception is chained as ``__cause__``; clients only ever see
    a generic message.
    """

    def __init__(self, message: str = "Storage backend failure") -> None:
        super().__init__(message)
