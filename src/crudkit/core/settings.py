"""Shared base settings for crudkit services.

``CrudBaseSettings`` holds the knobs every crudkit process needs: logging,
the record-store URL and the process-wide CRUD defaults that seed
:class:`~crudkit.core.service.CrudServiceOptions`.

Examples:
    >>> from crudkit.core.settings import CrudBaseSettings
    >>> settings = CrudBaseSettings(default_page_size=20)
    >>> settings.public_id_column
    'public_id'

Order of precedence (highest → lowest):
    1. Environment variables (``CRUDKIT_DATABASE_URL``, ...)
    2. ``.env`` file
    3. Defaults below

Tags:
    settings, configuration, pydantic, environment, crudkit
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PAGE_SIZE = 5
DEFAULT_PUBLIC_ID_COLUMN = "public_id"


class CrudBaseSettings(BaseSettings):
    """Common settings shared by the service and API layers.

    Fields
    ──────
    debug             : Expose exception detail in 500 responses
    log_level         : Structlog log level
    json_logs         : Force JSON (True) / console (False) rendering; auto when unset
    database_url      : SQLAlchemy URL of the record store
    default_page_size : Page size used when a filter carries no positive limit
    public_id_column  : Storage column backing the public identifier
    """

    model_config = SettingsConfigDict(
        env_prefix="CRUDKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    debug: bool = False
    log_level: str = "INFO"
    json_logs: bool | None = None

    # ── Storage ──────────────────────────────────────────────────
    database_url: str = Field(
        default="sqlite:///crudkit.db",
        description="SQLAlchemy-style connection URL",
    )

    # ── CRUD defaults ────────────────────────────────────────────
    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    public_id_column: str = Field(default=DEFAULT_PUBLIC_ID_COLUMN, min_length=1)


__all__ = [
    "CrudBaseSettings",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_PUBLIC_ID_COLUMN",
]
