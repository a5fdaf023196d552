"""
FastAPI application factory.

``create_app()`` wires middleware, error handlers, a health endpoint and
lifespan logging into a single ``FastAPI`` instance.  CRUD routers are
mounted afterwards with :func:`~crudkit.api.crud_router.add_crud_routes`.

Manifesto:
    The app factory is the single composition root: middleware and
    error handling are wired here so generated routers never touch
    them.

Tags:
    crudkit, api, app-factory, composition-root, FastAPI

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crudkit.api.deps import Settings, get_settings
from crudkit.api.middleware.errors import install_error_handlers
from crudkit.api.middleware.request_id import RequestIDMiddleware
from crudkit.api.settings import CrudAPISettings
from crudkit.core.logging import get_logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan — startup / shutdown log events."""
    log = get_logger("crudkit.api")
    log.info("crudkit API starting", title=app.title, version=app.version)
    yield
    log.info("crudkit API shutting down")


def create_app(*, settings: CrudAPISettings | None = None) -> FastAPI:
    """Build and return a configured FastAPI application.

    Parameters
    ----------
    settings : CrudAPISettings | None
        Override settings (useful for testing).  When ``None`` the cached
        singleton from :func:`get_settings` is used.
    """

    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )

    # Stash settings on app state for middleware access
    app.state.settings = settings
    app.dependency_overrides[get_settings] = lambda: settings

    # ── Middleware (outermost → innermost) ────────────────────────────
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Exception handlers ───────────────────────────────────────────
    install_error_handlers(app)

    # ── Health (root level, no prefix) ───────────────────────────────
    @app.get("/health", tags=["health"])
    def health(current: Settings) -> dict[str, str]:
        return {"status": "ok", "service": current.api_title, "version": current.api_version}

    return app
