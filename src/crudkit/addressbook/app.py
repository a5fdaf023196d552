"""
Address-book application — the sample crudkit wiring.

``create_addressbook_app()`` builds the engine from settings, creates the
schema, constructs one :class:`CrudService` per record type and mounts
them at ``{api_prefix}/contacts`` and ``{api_prefix}/tags``.

Usage::

    uvicorn crudkit.addressbook:create_addressbook_app --factory
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from crudkit.addressbook.models import Contact, Tag
from crudkit.addressbook.schemas import ContactSchema, TagSchema
from crudkit.api import add_crud_routes, create_app
from crudkit.api.deps import get_settings
from crudkit.api.settings import CrudAPISettings
from crudkit.core.logging import get_logger
from crudkit.core.orm import CrudBase, SQLAlchemyRecordStore, create_crud_engine, crud_session_factory
from crudkit.core.service import CrudService, CrudServiceOptions, attribute_accessors
from crudkit.core.settings import CrudBaseSettings

logger = get_logger(__name__)

CONTACT_LOOKUP_QUERY = "full_name LIKE ? OR email LIKE ?"
TAG_LOOKUP_QUERY = "name LIKE ?"


@dataclass
class AddressBook:
    """The address-book services and the engine behind them."""

    engine: Engine
    contacts: CrudService[Contact, str]
    tags: CrudService[Tag, str]


def init_schema(engine: Engine) -> list[str]:
    """Create the address-book tables; returns the table names."""
    CrudBase.metadata.create_all(engine, tables=[Contact.__table__, Tag.__table__])
    return [Contact.__tablename__, Tag.__tablename__]


def build_addressbook(
    settings: CrudBaseSettings,
    *,
    engine: Engine | None = None,
    session_factory: sessionmaker[Session] | None = None,
) -> AddressBook:
    """Construct the contacts and tags services over one engine."""
    engine = engine or create_crud_engine(settings.database_url)
    session_factory = session_factory or crud_session_factory(engine)

    contacts = CrudService(
        SQLAlchemyRecordStore(session_factory, Contact),
        *attribute_accessors("public_id"),
        CrudServiceOptions.from_settings(settings, lookup_query=CONTACT_LOOKUP_QUERY),
    )
    tags = CrudService(
        SQLAlchemyRecordStore(session_factory, Tag),
        *attribute_accessors("public_id"),
        CrudServiceOptions.from_settings(settings, lookup_query=TAG_LOOKUP_QUERY),
    )
    return AddressBook(engine=engine, contacts=contacts, tags=tags)


def create_addressbook_app(
    settings: CrudAPISettings | None = None,
    *,
    engine: Engine | None = None,
):
    """Build the address-book FastAPI application.

    Parameters
    ----------
    settings : CrudAPISettings | None
        Override settings; defaults to the cached process settings.
    engine : Engine | None
        Pre-built engine (tests pass an in-memory one).
    """
    settings = settings or get_settings()
    book = build_addressbook(settings, engine=engine)
    init_schema(book.engine)

    app = create_app(settings=settings)
    app.state.addressbook = book

    prefix = settings.api_prefix.rstrip("/")
    add_crud_routes(app, f"{prefix}/contacts", book.contacts, ContactSchema, tags=["contacts"])
    add_crud_routes(app, f"{prefix}/tags", book.tags, TagSchema, tags=["tags"])

    logger.info("addressbook_app_created", prefix=prefix, database=book.engine.url.render_as_string())
    return app
