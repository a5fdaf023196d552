"""
REST exposure layer for crudkit.

Binds :class:`~crudkit.core.service.CrudService` instances to a fixed set
of HTTP routes on FastAPI.  All data access lives in ``crudkit.core``; this
package handles only HTTP transport: decoding filters and bodies,
translating wire identifiers, and mapping errors to status codes.

Quick start::

    from crudkit.api import add_crud_routes, create_app

    app = create_app()
    add_crud_routes(app, "/api/contacts", contacts_service, ContactSchema)
"""

from crudkit.api.app import create_app
from crudkit.api.crud_router import add_crud_routes, create_crud_router
from crudkit.api.middleware.errors import install_error_handlers
from crudkit.api.settings import CrudAPISettings

__all__ = [
    "create_app",
    "create_crud_router",
    "add_crud_routes",
    "install_error_handlers",
    "CrudAPISettings",
]
