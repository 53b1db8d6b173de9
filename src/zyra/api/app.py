"""
FastAPI application factory.

``create_app()`` wires the runtime, middleware, routers, error handlers and
lifespan events into a single ``FastAPI`` instance. The lifespan arms
schedule timers on startup and cancels them on shutdown.

Example::

    from zyra.api.app import create_app
    from zyra.core.settings import ZyraSettings

    app = create_app(settings=ZyraSettings(data_dir="/var/lib/zyra"))
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from zyra.api.context import ZyraRuntime
from zyra.api.middleware.errors import (
    request_validation_handler,
    unhandled_exception_handler,
    zyra_error_handler,
)
from zyra.api.middleware.request_id import RequestIDMiddleware
from zyra.api.middleware.timing import TimingMiddleware
from zyra.core.errors import ZyraError
from zyra.core.logging import get_logger
from zyra.core.settings import ZyraSettings, get_settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup / shutdown hooks."""
    log = get_logger("zyra.api")
    runtime: ZyraRuntime = app.state.runtime

    log.info("zyra_api_starting", version=app.version, prefix=runtime.settings.api_prefix)
    runtime.start()
    try:
        yield
    finally:
        runtime.shutdown()
        log.info("zyra_api_shutting_down")


def create_app(
    *,
    settings: ZyraSettings | None = None,
    runtime: ZyraRuntime | None = None,
) -> FastAPI:
    """Build and return a fully-configured FastAPI application.

    Args:
        settings: Override settings (useful for testing). When ``None`` the
            cached instance from :func:`get_settings` is used.
        runtime: Pre-built runtime (tests inject one with a fake trigger).
            When ``None`` one is built from ``settings``.
    """
    if runtime is not None:
        settings = runtime.settings
    settings = settings or get_settings()
    runtime = runtime or ZyraRuntime.from_settings(settings)

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )

    app.state.settings = settings
    app.state.runtime = runtime

    # Override DI so endpoints use the provided settings
    app.dependency_overrides[get_settings] = lambda: settings

    # ── Middleware (outermost → innermost) ────────────────────────────
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Exception handlers ───────────────────────────────────────────
    app.add_exception_handler(ZyraError, zyra_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Routers ──────────────────────────────────────────────────────
    from zyra.api.routers import (
        background_executions,
        execution_history,
        health,
        workflow_schedules,
        workflows,
    )

    prefix = settings.api_prefix
    app.include_router(health.router, prefix=prefix, tags=["health"])
    app.include_router(workflow_schedules.router, prefix=prefix, tags=["schedules"])
    app.include_router(background_executions.router, prefix=prefix, tags=["executions"])
    app.include_router(execution_history.router, prefix=prefix, tags=["history"])
    app.include_router(workflows.router, prefix=prefix, tags=["workflows"])

    return app
