"""RFC 7807 ``application/problem+json`` responses for every error the API emits.

Handlers and services never build error bodies themselves: they raise an
:class:`APIError` (or a service-layer exception, which is mapped to one) and
the handlers registered by :func:`init_app` render it.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from tenant_auth.core.logger import ensure_request_id

log = logging.getLogger(__name__)

# Stable machine codes for statuses raised by Werkzeug itself
STATUS_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    415: "unsupported_media_type",
    422: "unprocessable_entity",
    429: "too_many_requests",
    500: "internal_server_error",
    503: "service_unavailable",
}


def problem_response(
    status: int, code: str, message: str, details: dict[str, Any] | None = None
) -> tuple[Response, int]:
    """Render a problem document and pair it with its status code."""
    status = int(status)
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": message,
        "instance": request.path if request else None,
        "code": code,
        "request_id": ensure_request_id(),
    }
    if details:
        body["details"] = details
    resp = jsonify(body)
    resp.mimetype = "application/problem+json"
    return resp, status


class APIError(Exception):
    """An error that already knows its HTTP status and public message.

    Subclasses pin ``status_code``, ``code`` and ``default_message``.
    """

    status_code: int = HTTPStatus.BAD_REQUEST
    code: str = "bad_request"
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class AuthFailed(APIError):
    code = "auth_error"
    default_message = "Email or password not match"


class Unauthorized(APIError):
    status_code = HTTPStatus.UNAUTHORIZED
    code = "unauthorized"
    default_message = "Unauthorized"


class Forbidden(APIError):
    status_code = HTTPStatus.FORBIDDEN
    code = "forbidden"
    default_message = "Forbidden"


class NotFound(APIError):
    status_code = HTTPStatus.NOT_FOUND
    code = "not_found"
    default_message = "Resource not found"


class Conflict(APIError):
    status_code = HTTPStatus.CONFLICT
    code = "conflict"
    default_message = "Conflict"


class InternalError(APIError):
    """Generic 500; whatever caused it is only written to the log."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    code = "internal_server_error"
    default_message = "Unexpected error"


def from_service_error(exc: Exception) -> APIError:
    """Map a service-layer exception onto its :class:`APIError`."""
    from tenant_auth.services._shared import errors as svc

    table: list[tuple[type[Exception], type[APIError]]] = [
        (svc.InvalidTokenError, Unauthorized),
        (svc.AuthError, AuthFailed),
        (svc.ForbiddenError, Forbidden),
        (svc.NotFoundError, NotFound),
        (svc.ConflictError, Conflict),
    ]
    for service_type, api_type in table:
        if isinstance(exc, service_type):
            return api_type(str(exc))
    if isinstance(exc, svc.PersistenceError):
        return InternalError()
    return APIError(str(exc))


def init_app(app: Flask) -> None:
    """Register the JSON error handlers.

    4xx outcomes are logged as warnings, 5xx as errors with the traceback.
    """
    from tenant_auth.services._shared.errors import ServiceError

    def _log(kind: str, status: int, code: str, message: str, *, exc_info: bool = False) -> None:
        log.log(
            logging.ERROR if status >= 500 else logging.WARNING,
            "%s: code=%s status=%s detail=%s",
            kind,
            code,
            status,
            message,
            exc_info=exc_info,
        )

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        _log("api_error", err.status_code, err.code, err.message)
        return problem_response(err.status_code, err.code, err.message, err.details or None)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        if err.__cause__ is not None:
            log.error("service_error.cause: %r", err.__cause__, exc_info=err.__cause__)
        return handle_api_error(from_service_error(err))

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        status = HTTPStatus.UNPROCESSABLE_ENTITY
        _log("validation_error", status, "validation_error", "Validation failed")
        return problem_response(
            status,
            "validation_error",
            "Validation failed",
            {"errors": err.normalized_messages()},
        )

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = STATUS_CODES.get(status, "error")
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        else:
            message = (err.description or code.replace("_", " ").capitalize()).strip()
        _log("http_error", status, code, message)
        return problem_response(status, code, message)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        _log("integrity_error", HTTPStatus.CONFLICT, "conflict", str(err.orig), exc_info=True)
        return problem_response(HTTPStatus.CONFLICT, "conflict", "Resource conflict")

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        status = HTTPStatus.SERVICE_UNAVAILABLE
        _log("operational_error", status, "service_unavailable", str(err.orig), exc_info=True)
        return problem_response(status, "service_unavailable", "Service temporarily unavailable")

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        status = HTTPStatus.INTERNAL_SERVER_ERROR
        _log("unhandled", status, "internal_server_error", type(err).__name__, exc_info=True)
        return problem_response(status, "internal_server_error", "Unexpected error")
