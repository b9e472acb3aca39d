"""Error Handlers — turn raised exceptions into the API's JSON error envelope.

Invariants:
    - Every error body has the shape produced by AgriLinkError.to_response()
    - Pydantic request errors become 400 VALIDATION_ERROR with one entry per field
    - Anything unexpected becomes 500 INTERNAL_ERROR; the exception text stays in the log
    - 4xx domain errors log at WARNING, 5xx at ERROR
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from agrilink.core.errors import (
    AgriLinkError, ErrorCategory, ErrorSeverity, ValidationError,
)

logger = logging.getLogger(__name__)


def _respond(exc: AgriLinkError, **extra) -> JSONResponse:
    body = exc.to_response()
    body["error"].update(extra)
    return JSONResponse(status_code=exc.http_status, content=body)


async def handle_domain_error(request: Request, exc: AgriLinkError) -> JSONResponse:
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level, f"{exc.code}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    field = getattr(exc, "field", None)
    return _respond(exc, field=field) if field else _respond(exc)


def field_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]


async def handle_request_validation(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = field_errors(exc)
    logger.warning(
        f"Rejected request body: {[d['field'] for d in details]}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return _respond(ValidationError("Invalid request data"), details=details)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        f"Unhandled {type(exc).__name__}: {exc}",
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    internal = AgriLinkError(
        "An unexpected error occurred", "INTERNAL_ERROR",
        ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
    )
    return _respond(internal)


_HANDLERS = (
    (AgriLinkError, handle_domain_error),
    (RequestValidationError, handle_request_validation),
    (Exception, handle_unexpected_error),
)


def register_error_handlers(app: FastAPI) -> None:
    for exc_class, handler in _HANDLERS:
        app.add_exception_handler(exc_class, handler)
