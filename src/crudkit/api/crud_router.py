"""
CRUD router factory — binds a :class:`~crudkit.core.service.CrudService`
to a fixed set of HTTP routes.

Endpoints (relative to the router prefix):
    GET    ""                 List records (query: page, limit, sort, offset)
    POST   ""                 List records (body: DataFilter)
    GET    /get/{public_id}   One record, 404 when absent
    GET    /count             Number of records
    GET    /lookup            Keyword search (query: keyword, page, limit, sort)
    POST   /create            Create one record
    POST   /create-all        Create a batch of records
    GET    /delete/{public_id}  Delete one record, rows affected
    POST   /delete-all        Delete by public ids (body: list of strings)
    POST   /update            Full replace of one record
    POST   /update-all        Full replace of a batch
    GET    /{public_id}       Alias of /get/{public_id}
    PUT    ""                 Alias of /update-all
    DELETE /{public_ids}      Comma-separated alias of /delete-all

Identifiers in paths and in the delete-all body travel as strings and are
converted by the service's id generator (``parse``) before the service is
called.  Malformed identifiers become the zero value and match nothing.

The router holds no state beyond the bound service.

Tags:
    crudkit, api, router, FastAPI, REST

Doc-Types: API_REFERENCE
"""

# No ``from __future__ import annotations`` here: endpoint signatures use the
# per-router ``schema`` class, which FastAPI must see as a real object.

from collections.abc import Callable, Sequence
from typing import Any, Optional

from fastapi import APIRouter, Body, FastAPI, Path, Query
from pydantic import BaseModel

from crudkit.api.middleware.errors import install_error_handlers
from crudkit.core.logging import get_logger
from crudkit.core.paging import DataFilter, PagedList
from crudkit.core.service import CrudService

logger = get_logger(__name__)


def create_crud_router(
    service: CrudService,
    schema: type[BaseModel],
    *,
    prefix: str = "",
    to_entity: Optional[Callable[[BaseModel], Any]] = None,
    tags: Optional[Sequence[str]] = None,
) -> APIRouter:
    """Build an :class:`APIRouter` exposing *service* under *prefix*.

    Parameters
    ----------
    service:
        The CRUD service to bind.
    schema:
        Pydantic model describing the wire shape of one record.  It must be
        able to validate records (``from_attributes=True``) and should omit
        the internal storage key.
    prefix:
        Base path, e.g. ``"/api/contacts"``.
    to_entity:
        Converts a validated payload into a record.  Defaults to
        ``service.store.model(**payload.model_dump())``.
    tags:
        OpenAPI tags.
    """
    router = APIRouter(prefix=prefix.rstrip("/"), tags=list(tags or []))
    parse = service.options.id_generator.parse
    page_model = PagedList[schema]

    if to_entity is None:
        model = service.store.model

        def to_entity(payload: BaseModel) -> Any:
            return model(**payload.model_dump())

    def render(entity: Any) -> BaseModel:
        return schema.model_validate(entity)

    def render_page(result: PagedList) -> PagedList:
        return result.map(render)

    def parse_ids(values: Sequence[str]) -> list[Any]:
        return [parse(value.strip()) for value in values if value.strip()]

    # ── Reads ─────────────────────────────────────────────────────────

    @router.get("", response_model=page_model)
    def list_records(
        page: int = Query(0, ge=0, description="Page index (0-based)"),
        limit: int = Query(0, description="Items per page; service default when ≤ 0"),
        sort: Optional[str] = Query(None, description="Comma-separated column[:asc|desc]"),
        offset: int = Query(0, ge=0, description="Row offset; overrides page when > 0"),
    ):
        """List one page of records."""
        data_filter = DataFilter(page=page, limit=limit, sort=sort, offset=offset)
        return render_page(service.get_all(data_filter))

    @router.post("", response_model=page_model)
    def filter_records(data_filter: Optional[DataFilter] = Body(None)):
        """List one page of records using a JSON filter body."""
        return render_page(service.get_all(data_filter))

    @router.get("/get/{public_id}", response_model=schema)
    def get_record(public_id: str = Path(..., description="Public identifier")):
        """Fetch one record by public identifier; 404 when absent."""
        return render(service.get_by_public_id(parse(public_id)))

    @router.get("/count", response_model=int)
    def count_records():
        """Count every record."""
        return service.count()

    @router.get("/lookup", response_model=page_model)
    def lookup_records(
        keyword: str = Query("", description="Free-text keyword"),
        page: int = Query(0, ge=0, description="Page index (0-based)"),
        limit: int = Query(0, description="Items per page; service default when ≤ 0"),
        sort: Optional[str] = Query(None, description="Comma-separated column[:asc|desc]"),
    ):
        """Keyword search through the service's lookup query."""
        data_filter = DataFilter(page=page, limit=limit, sort=sort)
        return render_page(service.lookup(keyword, data_filter))

    # ── Writes ────────────────────────────────────────────────────────

    @router.post("/create", response_model=schema)
    def create_record(payload: schema):
        """Create one record; its public identifier is assigned by the service."""
        return render(service.create(to_entity(payload)))

    @router.post("/create-all", response_model=list[schema])
    def create_records(payloads: list[schema]):
        """Create a batch of records atomically."""
        created = service.create_all([to_entity(payload) for payload in payloads])
        return [render(entity) for entity in created]

    @router.get("/delete/{public_id}", response_model=int)
    def delete_record(public_id: str = Path(..., description="Public identifier")):
        """Delete one record; 0 when nothing matched."""
        return service.delete_by_public_id(parse(public_id))

    @router.post("/delete-all", response_model=int)
    def delete_records(public_ids: list[str] = Body(..., description="Public identifiers")):
        """Delete every record whose public identifier is listed."""
        return service.delete_all(parse_ids(public_ids))

    @router.post("/update", response_model=int)
    def update_record(payload: schema):
        """Overwrite the record addressed by the payload's public identifier."""
        return service.update(to_entity(payload))

    @router.post("/update-all", response_model=int)
    def update_records(payloads: list[schema]):
        """Overwrite a batch of records in one transaction."""
        return service.update_all([to_entity(payload) for payload in payloads])

    # ── Resource-style aliases ────────────────────────────────────────

    @router.get("/{public_id}", response_model=schema)
    def get_record_alias(public_id: str = Path(..., description="Public identifier")):
        return get_record(public_id)

    @router.put("", response_model=int)
    def put_records(payloads: list[schema]):
        return update_records(payloads)

    @router.delete("/{public_ids}", response_model=int)
    def delete_records_alias(public_ids: str = Path(..., description="Comma-separated public identifiers")):
        return service.delete_all(parse_ids(public_ids.split(",")))

    logger.debug("crud_router_created", entity=service.entity_name, prefix=router.prefix)
    return router


def add_crud_routes(
    app: FastAPI,
    base: str,
    service: CrudService,
    schema: type[BaseModel],
    *,
    to_entity: Optional[Callable[[BaseModel], Any]] = None,
    tags: Optional[Sequence[str]] = None,
) -> APIRouter:
    """Mount a CRUD router for *service* at *base* and install error handlers."""
    install_error_handlers(app)
    router = create_crud_router(service, schema, prefix=base, to_entity=to_entity, tags=tags)
    app.include_router(router)
    return router


__all__ = ["create_crud_router", "add_crud_routes"]
