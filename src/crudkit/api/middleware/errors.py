"""
Error-handling middleware — maps crudkit errors to RFC 7807 responses.

Status mapping::

    ValidationError, request validation  → 400
    NotFoundError                        → 404
    ConfigError                          → 500  (message)
    DatabaseError (Query/Integrity)      → 500  (message only, no context)
    anything else                        → 500  (detail only in debug mode)
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from crudkit.api.schemas.common import ErrorDetail, ProblemDetail
from crudkit.core.errors import CrudError, ErrorCategory, ValidationError
from crudkit.core.logging import get_logger

logger = get_logger(__name__)

# ── Error category → HTTP status mapping ─────────────────────────────────

ERROR_CATEGORY_TO_STATUS: dict[ErrorCategory, int] = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.DATABASE: 500,
    ErrorCategory.CONFIG: 500,
    ErrorCategory.INTERNAL: 500,
    ErrorCategory.UNKNOWN: 500,
}

_TITLES: dict[int, str] = {
    400: "Bad Request",
    404: "Not Found",
    500: "Internal Server Error",
}


def status_for_category(category: ErrorCategory) -> int:
    """Resolve an error category to HTTP status, defaulting to 500."""
    return ERROR_CATEGORY_TO_STATUS.get(category, 500)


def problem_response(
    *,
    status: int,
    title: str,
    detail: str = "",
    instance: str = "",
    errors: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    """Build a RFC 7807 JSON error response."""
    body = ProblemDetail(
        title=title,
        status=status,
        detail=detail,
        instance=instance,
    )
    if errors:
        body.errors = [ErrorDetail(**e) for e in errors]
    return JSONResponse(status_code=status, content=body.model_dump())


def _debug_enabled(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(getattr(settings, "debug", False))


async def crud_error_handler(request: Request, exc: CrudError) -> JSONResponse:
    """Translate a :class:`CrudError` into a ProblemDetail response."""
    status = status_for_category(exc.category)
    if status >= 500:
        logger.error("request_failed", path=request.url.path, status=status, **exc.to_dict())
    else:
        logger.info("request_rejected", path=request.url.path, status=status, error=exc.message)

    errors = None
    if isinstance(exc, ValidationError) and exc.field:
        errors = [{"code": "VALIDATION_FAILED", "message": exc.message, "field": exc.field}]
    return problem_response(
        status=status,
        title=_TITLES.get(status, "Error"),
        detail=exc.message,
        instance=str(request.url),
        errors=errors,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Unparsable or invalid request input → 400 with per-field details."""
    errors = [
        {
            "code": str(err.get("type", "invalid")),
            "message": str(err.get("msg", "")),
            "field": ".".join(str(part) for part in err.get("loc", ())) or None,
        }
        for err in exc.errors()
    ]
    return problem_response(
        status=400,
        title="Bad Request",
        detail="Request validation failed",
        instance=str(request.url),
        errors=errors,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions — returns 500 with ProblemDetail."""
    logger.exception("unhandled_exception", path=request.url.path)
    return problem_response(
        status=500,
        title="Internal Server Error",
        detail=str(exc) if _debug_enabled(request) else "An unexpected error occurred.",
        instance=str(request.url),
    )


def install_error_handlers(app: FastAPI) -> None:
    """Register the crudkit exception handlers on *app* (idempotent)."""
    if getattr(app.state, "crud_error_handlers", False):
        return
    app.add_exception_handler(CrudError, crud_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.state.crud_error_handlers = True
