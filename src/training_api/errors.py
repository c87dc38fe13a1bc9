"""Service-layer exceptions and their JSON rendering.

Services raise these; the app turns each into ``{"error": message}``
with the exception's status code.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base exception for all service errors; carries an HTTP status code."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ServiceError):
    """Request data failed validation."""

    status_code = 400

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = list(details or [])


class UnauthorizedError(ServiceError):
    """No authenticated user, or a third-party link is missing/expired."""

    status_code = 401


class PermissionDeniedError(ServiceError):
    """Authenticated, but not allowed to touch this resource."""

    status_code = 403


class NotFoundError(ServiceError):
    """The requested plan, workout or profile does not exist."""

    status_code = 404


def format_validation_errors(errors: Iterable[Mapping[str, Any]]) -> list[str]:
    """``"field: message"`` lines for pydantic errors, without the ``body`` prefix."""
    details = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "")
        details.append(f"{loc}: {msg}" if loc else msg)
    return details


def _error_body(message: str, details: list[str] | None = None) -> dict:
    body: dict = {"error": message}
    if details:
        body["details"] = details
    return body


def register_error_handlers(app: FastAPI) -> None:
    """Render service, HTTP and request-validation errors as ``{"error": ...}``."""

    @app.exception_handler(ServiceError)
    async def _service_error(request: Request, exc: ServiceError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        details = exc.details if isinstance(exc, ValidationError) else None
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, details))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = format_validation_errors(exc.errors())
        return JSONResponse(status_code=400, content=_error_body("Invalid request", details))
