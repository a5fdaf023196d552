"""SQLAlchemy implementation of :class:`~crudkit.core.protocols.RecordStore`.

Architecture::

    ┌────────────────────────────────────────────────────────────────────┐
    │                   SQLAlchemyRecordStore[T]                         │
    │                                                                    │
    │   session_factory   ← crud_session_factory(engine)                 │
    │   model             ← mapped class (CrudBase subclass)             │
    │   session           ← set only for stores yielded by transaction() │
    │                                                                    │
    │   find(where, params, order_by, limit, offset) → list[T]  (ORM)    │
    │   count(where, params)                         → int      (Core)   │
    │   insert(entities)                             → None     (ORM)    │
    │   update(values, where, params)                → rowcount (Core)   │
    │   delete(where, params)                        → rowcount (Core)   │
    └────────────────────────────────────────────────────────────────────┘

Each call runs in its own session and transaction unless the store is bound
to one by :meth:`SQLAlchemyRecordStore.transaction`.  Driver exceptions are
translated: ``sqlalchemy.exc.IntegrityError`` → :class:`IntegrityError`,
any other ``SQLAlchemyError`` → :class:`QueryError`.

Tags:
    crudkit, orm, sqlalchemy, record-store
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

from sqlalchemy import delete as sa_delete
from sqlalchemy import exc as sa_exc
from sqlalchemy import func, inspect, select, text
from sqlalchemy import update as sa_update
from sqlalchemy.orm import Session, sessionmaker

from crudkit.core.errors import IntegrityError, QueryError
from crudkit.core.logging import get_logger
from crudkit.core.orm.session import bind_positional

T = TypeVar("T")

logger = get_logger(__name__)


class SQLAlchemyRecordStore(Generic[T]):
    """Record store for one mapped class."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        model: type[T],
        *,
        session: Session | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._model = model
        self._session = session

        mapper = inspect(model)
        self._table = mapper.local_table
        self._attr_by_column: dict[str, str] = {
            column.name: attr.key for attr in mapper.column_attrs for column in attr.columns
        }
        self._key_columns = frozenset(column.name for column in mapper.primary_key)

    # -- Metadata ---------------------------------------------------------

    @property
    def model(self) -> type[T]:
        return self._model

    @property
    def name(self) -> str:
        return self._table.name

    @property
    def columns(self) -> frozenset[str]:
        return frozenset(self._attr_by_column)

    @property
    def key_columns(self) -> frozenset[str]:
        return self._key_columns

    def values(self, entity: T) -> dict[str, Any]:
        return {
            column: getattr(entity, attr)
            for column, attr in self._attr_by_column.items()
            if column not in self._key_columns
        }

    # -- Session handling -------------------------------------------------

    @contextmanager
    def _scope(self, operation: str) -> Iterator[Session]:
        """Yield a session for one call and translate driver errors."""
        try:
            if self._session is not None:
                yield self._session
            else:
                with self._session_factory() as session, session.begin():
                    yield session
        except sa_exc.IntegrityError as exc:
            raise IntegrityError(str(exc.orig), cause=exc).with_context(
                entity=self.name, operation=operation
            ) from exc
        except sa_exc.SQLAlchemyError as exc:
            message = str(getattr(exc, "orig", None) or exc)
            raise QueryError(message, cause=exc).with_context(
                entity=self.name, operation=operation
            ) from exc

    @contextmanager
    def transaction(self) -> Iterator[SQLAlchemyRecordStore[T]]:
        """Yield a store whose calls share one transaction.

        A store that is already bound joins the outer transaction.
        """
        if self._session is not None:
            yield self
            return

        with self._scope("transaction") as session:
            logger.debug("store.transaction_begin", entity=self.name)
            yield SQLAlchemyRecordStore(self._session_factory, self._model, session=session)
        logger.debug("store.transaction_commit", entity=self.name)

    # -- Operations -------------------------------------------------------

    def find(
        self,
        where: str,
        params: Sequence[Any] = (),
        *,
        order_by: str = "",
        limit: int | None = None,
        offset: int = 0,
    ) -> list[T]:
        stmt = select(self._model).where(bind_positional(where, params))
        if order_by:
            stmt = stmt.order_by(text(order_by))
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        with self._scope("find") as session:
            return list(session.scalars(stmt).all())

    def count(self, where: str, params: Sequence[Any] = ()) -> int:
        stmt = select(func.count()).select_from(self._table).where(bind_positional(where, params))
        with self._scope("count") as session:
            return int(session.scalar(stmt) or 0)

    def insert(self, entities: Sequence[T]) -> None:
        if not entities:
            return
        with self._scope("insert") as session:
            session.add_all(entities)
            session.flush()

    def update(self, values: Mapping[str, Any], where: str, params: Sequence[Any] = ()) -> int:
        stmt = sa_update(self._table).where(bind_positional(where, params)).values(dict(values))
        with self._scope("update") as session:
            return session.execute(stmt).rowcount

    def delete(self, where: str, params: Sequence[Any] = ()) -> int:
        stmt = sa_delete(self._table).where(bind_positional(where, params))
        with self._scope("delete") as session:
            return session.execute(stmt).rowcount

    def __repr__(self) -> str:
        bound = " bound" if self._session is not None else ""
        return f"SQLAlchemyRecordStore({self._model.__name__}{bound})"


__all__ = ["SQLAlchemyRecordStore"]
