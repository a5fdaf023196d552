"""
FastAPI dependencies — shared singletons.

Manifesto:
    Settings are loaded once per process.  Tests and embedding
    applications pass their own settings to :func:`create_app`, which
    overrides this dependency.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from crudkit.api.settings import CrudAPISettings


@lru_cache(maxsize=1)
def get_settings() -> CrudAPISettings:
    """Cached settings — loaded once per process."""
    return CrudAPISettings()


Settings = Annotated[CrudAPISettings, Depends(get_settings)]
