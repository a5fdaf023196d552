"""
Generic CRUD service over a :class:`~crudkit.core.protocols.RecordStore`.

One :class:`CrudService` mediates every read and write for one record type.
It owns three concerns and delegates everything else to the store:

- **Paging** — every list operation normalizes its filter and returns a
  :class:`~crudkit.core.paging.PagedList`.
- **Public identifiers** — new records get a generated public identifier
  before insert; lookups, updates and deletes address records by it.  The
  internal storage key is never read or written.
- **Predicate shaping** — criteria objects, query templates and keyword
  lookups become ``?``-parameterized predicates for the store.

Manifesto:
    Per-entity repository and controller code is boilerplate.  The only
    structural knowledge the service needs about a record type is how to
    read and write its public identifier, supplied by the caller as an
    accessor/mutator pair.

Architecture::

    ┌──────────────────────────────────────────────────────────────────┐
    │                     CrudService[T, TId]                          │
    │                                                                  │
    │  find_where / find_by_query / get_all / lookup  → PagedList[T]   │
    │  find_one / find_one_by_query / find_one_by_public_id → T | None │
    │  get_by_public_id                        → T (NotFoundError)     │
    │  count / count_where                            → int            │
    │  create / create_all                            → T / list[T]    │
    │  update / update_all / update_where             → rows affected  │
    │  delete_where / delete_by_query / delete_all    → rows removed   │
    └───────────────────────────────┬──────────────────────────────────┘
                                    │  where + params
                                    ▼
                          RecordStore[T] (find, count, insert,
                                          update, delete, transaction)

Criteria objects:
    A criteria object is an entity instance or a mapping of column → value.

    - Entity: columns holding ``None`` or a zero value (``""``, ``0``,
      ``False``) are wildcards.  A criteria entity therefore cannot ask for
      "column equals zero/empty".
    - Mapping: every key is matched exactly, zero values included; ``None``
      matches ``IS NULL``.  Use this form when zero values matter.

Atomicity:
    ``create_all`` is one store insert; ``update_all`` runs inside one store
    transaction.  Either every row of the batch is written or none is.

Examples:
    >>> service = CrudService(store, *attribute_accessors("public_id"))
    >>> created = service.create(Contact(full_name="Ada"))
    >>> service.find_one_by_public_id(created.public_id).full_name
    'Ada'

Tags:
    crud, repository, pagination, public-id, crudkit

Doc-Types:
    - API Reference
    - Architecture Documentation
"""

from __future__ import annotations

import numbers
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any, Generic, TypeVar, Union

from crudkit.core.errors import ConfigError, NotFoundError, QueryError, ValidationError
from crudkit.core.ids import DefaultIdGenerator, IdGenerator, IdKind
from crudkit.core.logging import get_logger
from crudkit.core.paging import (
    DataFilter,
    PagedList,
    build_order_by,
    normalize_filter,
    paged,
)
from crudkit.core.protocols import RecordStore, count_placeholders
from crudkit.core.settings import DEFAULT_PAGE_SIZE, DEFAULT_PUBLIC_ID_COLUMN, CrudBaseSettings

T = TypeVar("T")
TId = TypeVar("TId")

Criteria = Union[T, Mapping[str, Any]]

logger = get_logger(__name__)

MATCH_ALL = "1=1"


# =============================================================================
# Options
# =============================================================================


@dataclass(frozen=True)
class CrudServiceOptions:
    """Per-service configuration, fixed at construction.

    Unset fields (``0``, ``""``, ``None``) receive the process-wide defaults
    in :meth:`resolve`.

    Attributes:
        default_page_size: Page size when a filter has no positive limit
        public_id_column_name: Storage column backing the public identifier
        id_generator: Produces new identifiers and parses wire identifiers
        lookup_query: ``?``-template used by :meth:`CrudService.lookup`
        disable_auto_id_generation: Keep caller-supplied identifiers on create
    """

    default_page_size: int = 0
    public_id_column_name: str = ""
    id_generator: IdGenerator | None = None
    lookup_query: str = ""
    disable_auto_id_generation: bool = False

    def resolve(self, id_kind: IdKind = IdKind.STRING) -> CrudServiceOptions:
        """Return a copy with every unset field defaulted."""
        return replace(
            self,
            default_page_size=self.default_page_size if self.default_page_size > 0 else DEFAULT_PAGE_SIZE,
            public_id_column_name=self.public_id_column_name or DEFAULT_PUBLIC_ID_COLUMN,
            id_generator=self.id_generator or DefaultIdGenerator(id_kind),
        )

    @classmethod
    def from_settings(cls, settings: CrudBaseSettings, **overrides: Any) -> CrudServiceOptions:
        """Seed options from settings; keyword overrides win."""
        base = {
            "default_page_size": settings.default_page_size,
            "public_id_column_name": settings.public_id_column,
        }
        base.update(overrides)
        return cls(**base)


def attribute_accessors(attribute: str = "public_id") -> tuple[Callable[[Any], Any], Callable[[Any, Any], None]]:
    """Accessor/mutator pair for a plain attribute holding the public identifier."""

    def get_public_id(entity: Any) -> Any:
        return getattr(entity, attribute)

    def set_public_id(entity: Any, value: Any) -> None:
        setattr(entity, attribute, value)

    return get_public_id, set_public_id


def _is_zero(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes)):
        return len(value) == 0
    if isinstance(value, numbers.Number):
        return value == 0
    return False


def _build_where(conditions: Mapping[str, Any]) -> tuple[str, tuple]:
    """Build ``col = ? AND ...`` from *conditions*; ``None`` becomes ``IS NULL``."""
    parts: list[str] = []
    params: list[Any] = []
    for column, value in conditions.items():
        if value is None:
            parts.append(f"{column} IS NULL")
        else:
            parts.append(f"{column} = ?")
            params.append(value)
    where = " AND ".join(parts) if parts else MATCH_ALL
    return where, tuple(params)


# =============================================================================
# Service
# =============================================================================


class CrudService(Generic[T, TId]):
    """Generic find/count/create/update/delete for one record type.

    Parameters:
        store: Record store for the managed type.
        get_public_id: Reads the public identifier of a record.
        set_public_id: Writes the public identifier of a record.
        options: Service options; unset fields are defaulted.
        id_kind: Native identifier type, used for the default generator.

    Raises:
        ConfigError: the public-id column is not a column of the store.
    """

    def __init__(
        self,
        store: RecordStore[T],
        get_public_id: Callable[[T], TId],
        set_public_id: Callable[[T, TId], None],
        options: CrudServiceOptions | None = None,
        *,
        id_kind: IdKind = IdKind.STRING,
    ) -> None:
        self._store = store
        self._get_public_id = get_public_id
        self._set_public_id = set_public_id
        self._options = (options or CrudServiceOptions()).resolve(id_kind)

        if self._options.public_id_column_name not in store.columns:
            raise ConfigError(
                f"public id column {self._options.public_id_column_name!r} is not a column of {store.name}"
            ).with_context(entity=store.name, column=self._options.public_id_column_name)

    # -- Properties -------------------------------------------------------

    @property
    def options(self) -> CrudServiceOptions:
        return self._options

    @property
    def store(self) -> RecordStore[T]:
        return self._store

    @property
    def entity_name(self) -> str:
        return self._store.name

    @property
    def _pid_column(self) -> str:
        return self._options.public_id_column_name

    # -- Predicate shaping ------------------------------------------------

    def _criteria_predicate(self, criteria: Criteria | None) -> tuple[str, tuple]:
        if criteria is None:
            return MATCH_ALL, ()
        if isinstance(criteria, Mapping):
            unknown = set(criteria) - self._store.columns
            if unknown:
                raise QueryError(f"unknown column(s): {', '.join(sorted(unknown))}").with_context(
                    entity=self.entity_name
                )
            return _build_where(criteria)
        values = self._store.values(criteria)
        return _build_where({column: value for column, value in values.items() if not _is_zero(value)})

    def _check_params(self, query: str, params: Sequence[Any]) -> None:
        expected = count_placeholders(query)
        if expected != len(params):
            raise QueryError(
                f"query has {expected} placeholder(s) but {len(params)} parameter(s) were given"
            ).with_context(entity=self.entity_name, query=query)

    def _find_page(
        self,
        where: str,
        params: Sequence[Any],
        data_filter: DataFilter | None,
        operation: str,
    ) -> PagedList[T]:
        self._check_params(where, params)
        normalized = normalize_filter(data_filter, self._options.default_page_size)
        items = self._store.find(
            where,
            params,
            order_by=build_order_by(normalized),
            limit=normalized.limit,
            offset=normalized.skip,
        )
        total = self._store.count(where, params)
        logger.debug(
            "crud.find",
            entity=self.entity_name,
            operation=operation,
            page=normalized.page,
            limit=normalized.limit,
            items=len(items),
            total=total,
        )
        return PagedList.create(items, total, normalized)

    # -- Finders ----------------------------------------------------------

    def find_where(self, criteria: Criteria | None, data_filter: DataFilter | None = None) -> PagedList[T]:
        """Page of records equal to *criteria* on its populated columns."""
        where, params = self._criteria_predicate(criteria)
        return self._find_page(where, params, data_filter, "find_where")

    def find_by_query(self, query: str, *params: Any, data_filter: DataFilter | None = None) -> PagedList[T]:
        """Page of records matching the ``?``-parameterized predicate *query*."""
        return self._find_page(query, params, data_filter, "find_by_query")

    def get_all(self, data_filter: DataFilter | None = None) -> PagedList[T]:
        return self._find_page(MATCH_ALL, (), data_filter, "get_all")

    def lookup(self, keyword: str, data_filter: DataFilter | None = None) -> PagedList[T]:
        """Keyword search through the configured lookup query.

        ``%keyword%`` is bound to every placeholder of the template.

        Raises:
            ConfigError: no lookup query was configured.
        """
        template = self._options.lookup_query
        if not template:
            raise ConfigError(
                "lookup query should be provided in the service options"
            ).with_context(entity=self.entity_name, operation="lookup")
        params = (f"%{keyword}%",) * count_placeholders(template)
        return self._find_page(template, params, data_filter, "lookup")

    def find_one(self, criteria: Criteria | None = None) -> T | None:
        """First record matching *criteria* (any record when omitted), else ``None``."""
        result = self.find_where(criteria, paged(0, 1))
        return result.items[0] if result.items else None

    def find_one_by_query(self, query: str, *params: Any) -> T | None:
        result = self.find_by_query(query, *params, data_filter=paged(0, 1))
        return result.items[0] if result.items else None

    def find_one_by_public_id(self, public_id: TId) -> T | None:
        return self.find_one_by_query(f"{self._pid_column} = ?", public_id)

    def get_by_public_id(self, public_id: TId) -> T:
        """Like :meth:`find_one_by_public_id` but absence raises.

        Raises:
            NotFoundError: no record carries *public_id*.
        """
        entity = self.find_one_by_public_id(public_id)
        if entity is None:
            raise NotFoundError(self.entity_name, public_id)
        return entity

    # -- Counting ---------------------------------------------------------

    def count(self, criteria: Criteria | None = None) -> int:
        where, params = self._criteria_predicate(criteria)
        return self._store.count(where, params)

    def count_where(self, query: str, *params: Any) -> int:
        self._check_params(query, params)
        return self._store.count(query, params)

    # -- Creation ---------------------------------------------------------

    def create(self, entity: T | None) -> T:
        """Assign a fresh public identifier to *entity* and insert it.

        Raises:
            ValidationError: *entity* is ``None``.
        """
        if entity is None:
            raise ValidationError("cannot create a missing entity").with_context(
                entity=self.entity_name, operation="create"
            )
        return self.create_all([entity])[0]

    def create_all(self, entities: Sequence[T]) -> list[T]:
        """Assign identifiers and insert *entities* in one atomic operation.

        The returned list preserves input order; each record carries its
        assigned public identifier.
        """
        batch = list(entities)
        if any(entity is None for entity in batch):
            raise ValidationError("cannot create a missing entity").with_context(
                entity=self.entity_name, operation="create_all"
            )
        if not self._options.disable_auto_id_generation:
            generator = self._options.id_generator
            for entity in batch:
                self._set_public_id(entity, generator.get_new_id())
        self._store.insert(batch)
        logger.debug("crud.create", entity=self.entity_name, rows=len(batch))
        return batch

    # -- Deletion ---------------------------------------------------------

    def delete_where(self, criteria: Criteria) -> int:
        """Delete records matching *criteria*.

        Raises:
            ValidationError: the criteria has no populated column.
        """
        where, params = self._criteria_predicate(criteria)
        if where == MATCH_ALL:
            raise ValidationError(
                "refusing to delete without criteria; use delete_by_query('1=1') to clear the table"
            ).with_context(entity=self.entity_name, operation="delete_where")
        return self._delete(where, params)

    def delete_by_query(self, query: str, *params: Any) -> int:
        self._check_params(query, params)
        return self._delete(query, params)

    def delete_by_public_id(self, public_id: TId) -> int:
        return self._delete(f"{self._pid_column} = ?", (public_id,))

    def delete_all(self, public_ids: Sequence[TId]) -> int:
        """Delete every record whose public identifier is in *public_ids*."""
        ids = tuple(public_ids)
        if not ids:
            return 0
        placeholders = ", ".join("?" * len(ids))
        return self._delete(f"{self._pid_column} IN ({placeholders})", ids)

    def _delete(self, where: str, params: Sequence[Any]) -> int:
        rows = self._store.delete(where, params)
        logger.debug("crud.delete", entity=self.entity_name, rows=rows)
        return rows

    # -- Updates ----------------------------------------------------------

    def update(self, entity: T) -> int:
        return self.update_all([entity])

    def update_all(self, entities: Sequence[T]) -> int:
        """Overwrite each stored record addressed by its public identifier.

        Every column except the internal key and the public identifier is
        replaced with the entity's value.  Unknown identifiers contribute 0.
        The batch runs in one transaction.

        Raises:
            ValidationError: an entity is missing or carries no public identifier.
        """
        batch = list(entities)
        if not batch:
            return 0

        rows = 0
        with self._store.transaction() as tx:
            for entity in batch:
                if entity is None:
                    raise ValidationError("cannot update a missing entity").with_context(
                        entity=self.entity_name, operation="update_all"
                    )
                public_id = self._get_public_id(entity)
                if public_id is None or public_id == "":
                    raise ValidationError(
                        "entity has no public id",
                        field=self._pid_column,
                    ).with_context(entity=self.entity_name, operation="update_all")
                values = tx.values(entity)
                values.pop(self._pid_column, None)
                if not values:
                    raise ValidationError("entity has no columns to update").with_context(
                        entity=self.entity_name, operation="update_all"
                    )
                rows += tx.update(values, f"{self._pid_column} = ?", (public_id,))
        logger.debug("crud.update", entity=self.entity_name, entities=len(batch), rows=rows)
        return rows

    def update_where(self, entity: T, query: str, *params: Any) -> int:
        """Apply the populated (non-``None``) columns of *entity* to every match.

        The public identifier column is never written.
        """
        if entity is None:
            raise ValidationError("cannot update from a missing entity").with_context(
                entity=self.entity_name, operation="update_where"
            )
        self._check_params(query, params)
        values = {
            column: value
            for column, value in self._store.values(entity).items()
            if value is not None and column != self._pid_column
        }
        if not values:
            raise ValidationError("entity has no populated columns to apply").with_context(
                entity=self.entity_name, operation="update_where"
            )
        rows = self._store.update(values, query, params)
        logger.debug("crud.update_where", entity=self.entity_name, rows=rows)
        return rows

    def __repr__(self) -> str:
        return f"CrudService({self.entity_name}, public_id={self._pid_column})"


__all__ = [
    "CrudService",
    "CrudServiceOptions",
    "Criteria",
    "attribute_accessors",
]
