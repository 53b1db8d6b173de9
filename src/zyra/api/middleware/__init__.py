"""HTTP middleware and exception handlers."""

from .errors import (
    error_response,
    request_validation_handler,
    status_for_category,
    unhandled_exception_handler,
    zyra_error_handler,
)
from .request_id import RequestIDMiddleware
from .timing import TimingMiddleware

__all__ = [
    "RequestIDMiddleware",
    "TimingMiddleware",
    "error_response",
    "request_validation_handler",
    "status_for_category",
    "unhandled_exception_handler",
    "zyra_error_handler",
]
