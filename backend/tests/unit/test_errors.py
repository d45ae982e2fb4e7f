"""Tests for mapping service exceptions onto API errors."""

from __future__ import annotations

import pytest

from tenant_auth.core.errors import (
    APIError,
    AuthFailed,
    Conflict,
    Forbidden,
    InternalError,
    NotFound,
    Unauthorized,
    from_service_error,
)
from tenant_auth.services._shared.errors import (
    AuthError,
    ConflictError,
    ForbiddenError,
    InvalidTokenError,
    NotFoundError,
    PersistenceError,
    ServiceError,
)


@pytest.mark.parametrize(
    ("exc", "expected", "status", "code"),
    [
        (InvalidTokenError("expired"), Unauthorized, 401, "unauthorized"),
        (AuthError(), AuthFailed, 400, "auth_error"),
        (ForbiddenError(), Forbidden, 403, "forbidden"),
        (NotFoundError("User", 7), NotFound, 404, "not_found"),
        (ConflictError("User", "email already exists"), Conflict, 409, "conflict"),
    ],
)
def test_service_errors_map_to_statuses(exc, expected, status, code):
    err = from_service_error(exc)
    assert isinstance(err, expected)
    assert err.status_code == status
    assert err.code == code
    assert err.message == str(exc)


def test_auth_error_keeps_the_generic_message():
    assert from_service_error(AuthError()).message == "Email or password not match"


def test_persistence_error_hides_driver_message():
    err = from_service_error(PersistenceError("connection refused on 10.0.0.3"))
    assert isinstance(err, InternalError)
    assert err.status_code == 500
    assert "10.0.0.3" not in err.message


def test_unknown_service_error_is_bad_request():
    err = from_service_error(ServiceError("odd"))
    assert type(err) is APIError
    assert err.status_code == 400
    assert err.message == "odd"
