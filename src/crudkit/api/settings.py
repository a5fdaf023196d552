"""
API-specific settings.

Extends :class:`~crudkit.core.settings.CrudBaseSettings` with parameters
that govern the REST transport (bind address, prefix, CORS).

All values can be overridden via environment variables prefixed with
``CRUDKIT_`` (``CRUDKIT_PORT``, ``CRUDKIT_API_PREFIX``...).
"""

from __future__ import annotations

from pydantic import Field

from crudkit.core.settings import CrudBaseSettings


class CrudAPISettings(CrudBaseSettings):
    """Settings for a crudkit REST API.

    Order of precedence (highest → lowest):
        1. Environment variables (``CRUDKIT_API_PREFIX``, etc.)
        2. ``.env`` file
        3. Defaults below
    """

    # ── Server ───────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8080, description="Bind port")

    # ── API ──────────────────────────────────────────────────────────────
    api_prefix: str = Field(default="/api", description="URL prefix for all CRUD endpoints")
    api_title: str = Field(default="crudkit API", description="OpenAPI title")
    api_version: str = Field(default="0.1.0", description="OpenAPI version string")

    # ── CORS ─────────────────────────────────────────────────────────────
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins",
    )
