"""
Error handlers: map zyra errors to ``{"error": ..., "details": ...}`` responses.
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from zyra.core.errors import ErrorCategory, ZyraError
from zyra.core.logging import get_logger

logger = get_logger(__name__)

# ── Error category → HTTP status mapping ─────────────────────────────────

CATEGORY_TO_STATUS: dict[ErrorCategory, int] = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.CONFIG: 500,
    ErrorCategory.ORCHESTRATION: 500,
    ErrorCategory.NETWORK: 500,
    ErrorCategory.STORAGE: 500,
    ErrorCategory.INTERNAL: 500,
}


def status_for_category(category: ErrorCategory) -> int:
    """Resolve an error category to HTTP status, defaulting to 500."""
    return CATEGORY_TO_STATUS.get(category, 500)


def error_response(status: int, error: str, details: str | None = None) -> JSONResponse:
    body = {"error": error}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status, content=body)


async def zyra_error_handler(request: Request, exc: ZyraError) -> JSONResponse:
    status = status_for_category(exc.category)
    if status >= 500:
        logger.error("request_failed", path=request.url.path, **exc.to_dict())
    details = str(exc.cause) if exc.cause is not None else None
    return error_response(status, exc.message, details)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Body/query validation failures are client errors (400, not 422)."""
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return error_response(400, "Invalid request", "; ".join(problems) or None)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions: returns 500."""
    logger.exception("unhandled_exception", path=request.url.path)
    debug = request.app.state.settings.debug
    return error_response(500, "Internal server error", str(exc) if debug else None)
