"""
Structural protocols for crudkit.

:class:`RecordStore` is the ONLY contract the generic CRUD service has with
persistence.  The service never imports a driver or an ORM; it shapes
predicates, pages and identifiers and hands them to a store.

Architecture::

    CrudService ──calls──► RecordStore (protocol, YOU ARE HERE)
                               │
                               ├── SQLAlchemyRecordStore  (crudkit.core.orm)
                               └── any object with the same shape

Predicates:
    ``where`` is a SQL boolean expression using positional ``?``
    placeholders; ``params`` supplies their values in order.  ``?`` inside
    single-quoted literals is not a placeholder.  ``"1=1"`` matches all rows.

Guardrails:
    ❌ DON'T: Put paging or identifier logic in a store
    ✅ DO: Keep stores dumb; shaping belongs to CrudService

    ❌ DON'T: Leak driver exceptions out of a store
    ✅ DO: Wrap them in QueryError / IntegrityError with ``cause=``

Tags:
    protocol, record-store, persistence, crudkit
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import AbstractContextManager
from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class RecordStore(Protocol[T]):
    """
    Narrow persistence interface for one record type.

    Every call is a self-contained unit of work unless the store was
    obtained from :meth:`transaction`, in which case all calls share that
    transaction.
    """

    @property
    def model(self) -> type[T]:
        """The record class managed by this store."""
        ...

    @property
    def name(self) -> str:
        """Entity name used in logs and error context (table name)."""
        ...

    @property
    def columns(self) -> frozenset[str]:
        """All storage column names, internal key included."""
        ...

    @property
    def key_columns(self) -> frozenset[str]:
        """Internal key columns; never exposed or written by the service."""
        ...

    def values(self, entity: T) -> dict[str, Any]:
        """Column values of *entity* keyed by column name, key columns excluded."""
        ...

    def find(
        self,
        where: str,
        params: Sequence[Any] = (),
        *,
        order_by: str = "",
        limit: int | None = None,
        offset: int = 0,
    ) -> list[T]:
        """Return matching records in the requested order and window."""
        ...

    def count(self, where: str, params: Sequence[Any] = ()) -> int:
        """Return the number of matching records."""
        ...

    def insert(self, entities: Sequence[T]) -> None:
        """Insert all *entities* in one atomic storage operation."""
        ...

    def update(self, values: Mapping[str, Any], where: str, params: Sequence[Any] = ()) -> int:
        """Write *values* to every matching row; return rows affected."""
        ...

    def delete(self, where: str, params: Sequence[Any] = ()) -> int:
        """Delete every matching row; return rows removed."""
        ...

    def transaction(self) -> AbstractContextManager[RecordStore[T]]:
        """Yield a store bound to one transaction.

        Commits when the block exits cleanly and rolls back when it raises.
        """
        ...


def iter_placeholders(template: str) -> Iterator[int]:
    """Yield the index of every ``?`` placeholder outside single-quoted literals."""
    in_literal = False
    for index, ch in enumerate(template):
        if ch == "'":
            # '' inside a literal toggles twice, leaving the state unchanged
            in_literal = not in_literal
        elif ch == "?" and not in_literal:
            yield index


def count_placeholders(template: str) -> int:
    """Number of positional ``?`` placeholders in *template*."""
    return sum(1 for _ in iter_placeholders(template))


__all__ = [
    "RecordStore",
    "iter_placeholders",
    "count_placeholders",
]
