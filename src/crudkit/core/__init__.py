"""crudkit core -- storage-agnostic CRUD primitives.

Manifesto:
    Per-entity repository code repeats the same paging, identifier and
    predicate handling for every record type.  ``crudkit.core`` does it once,
    behind a narrow record-store protocol, so an entity only has to say how
    its public identifier is read and written.

Architecture::

    Layer 1 -- Types & Errors
        errors.py          CrudError hierarchy (ValidationError, NotFoundError, ...)
        protocols.py       RecordStore protocol + placeholder helpers
        settings.py        CrudBaseSettings (pydantic-settings)
        logging.py         structlog configuration

    Layer 2 -- Building Blocks
        paging.py          DataFilter, SortSpec, PagedList[T]
        ids.py             IdKind, DefaultIdGenerator, parse_id

    Layer 3 -- Service
        service.py         CrudService[T, TId], CrudServiceOptions

    Layer 4 -- Storage
        orm/               SQLAlchemy 2.0 record store

Tags:
    crudkit, core, crud, pagination, repository
"""

from crudkit.core.errors import (
    ConfigError,
    ConfigurationError,
    CrudError,
    DatabaseError,
    ErrorCategory,
    IntegrityError,
    NotFoundError,
    QueryError,
    ValidationError,
)
from crudkit.core.ids import DefaultIdGenerator, IdGenerator, IdKind, parse_id, random_string
from crudkit.core.paging import (
    DataFilter,
    PagedList,
    SortSpec,
    build_order_by,
    normalize_filter,
    paged,
    paged_and_sorted,
    parse_sort,
)
from crudkit.core.protocols import RecordStore
from crudkit.core.service import CrudService, CrudServiceOptions, attribute_accessors
from crudkit.core.settings import CrudBaseSettings

__all__ = [
    # errors
    "CrudError",
    "ErrorCategory",
    "ValidationError",
    "NotFoundError",
    "ConfigError",
    "ConfigurationError",
    "DatabaseError",
    "QueryError",
    "IntegrityError",
    # ids
    "IdKind",
    "IdGenerator",
    "DefaultIdGenerator",
    "parse_id",
    "random_string",
    # paging
    "DataFilter",
    "SortSpec",
    "PagedList",
    "paged",
    "paged_and_sorted",
    "parse_sort",
    "normalize_filter",
    "build_order_by",
    # service
    "RecordStore",
    "CrudService",
    "CrudServiceOptions",
    "attribute_accessors",
    "CrudBaseSettings",
]
