"""SQLAlchemy engine factory, session factory and positional binding.

This module provides:

* ``create_crud_engine``    -- Create a SA engine from a URL.
* ``crud_session_factory``  -- ``sessionmaker`` with ``expire_on_commit=False``
  so records returned by the store stay readable after their session closes.
* ``bind_positional``       -- Turn a ``?``-placeholder predicate plus a
  positional parameter sequence into a bound ``text()`` clause.

Tags:
    crudkit, orm, sqlalchemy, session, engine
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import TextClause, event, text
from sqlalchemy import create_engine as _sa_create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from crudkit.core.errors import QueryError
from crudkit.core.protocols import iter_placeholders


def _is_memory_url(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def create_crud_engine(
    url: str = "sqlite:///crudkit.db",
    *,
    echo: bool = False,
    pool_size: int | None = None,
    max_overflow: int | None = None,
    pool_timeout: int | None = None,
    **kwargs: Any,
) -> Engine:
    """Create a SQLAlchemy engine with sane defaults.

    Parameters
    ----------
    url:
        Database URL (``sqlite:///…``, ``postgresql://…``, etc.)
    echo:
        If ``True``, log all SQL.
    pool_size, max_overflow, pool_timeout:
        Connection pool parameters (ignored for SQLite).
    **kwargs:
        Extra arguments forwarded to ``sqlalchemy.create_engine``.
    """

    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        if _is_memory_url(url):
            # One shared connection, otherwise every session sees an empty database
            kwargs.setdefault("poolclass", StaticPool)
        engine = _sa_create_engine(url, echo=echo, connect_args=connect_args, **kwargs)

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection: Any, _rec: Any) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    pool_kwargs: dict[str, Any] = {}
    if pool_size is not None:
        pool_kwargs["pool_size"] = pool_size
    if max_overflow is not None:
        pool_kwargs["max_overflow"] = max_overflow
    if pool_timeout is not None:
        pool_kwargs["pool_timeout"] = pool_timeout

    return _sa_create_engine(url, echo=echo, pool_pre_ping=True, **pool_kwargs, **kwargs)


def crud_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a ``sessionmaker`` bound to *engine* with ``expire_on_commit=False``."""
    return sessionmaker(bind=engine, expire_on_commit=False)


def _escape_colons(fragment: str) -> str:
    # text() reads ``:word`` as a bind parameter; user text never carries one
    return fragment.replace(":", "\\:")


def bind_positional(sql: str, params: Sequence[Any] = (), *, prefix: str = "p") -> TextClause:
    """Rewrite ``?`` placeholders to ``:p0, :p1, …`` and bind *params*.

    Every other colon in *sql* is escaped, so literals such as
    ``'Room :a1'`` reach the database verbatim.

    Raises:
        QueryError: placeholder count differs from ``len(params)``.
    """
    positions = list(iter_placeholders(sql))
    if len(positions) != len(params):
        raise QueryError(
            f"query has {len(positions)} placeholder(s) but {len(params)} parameter(s) were given"
        ).with_context(query=sql)

    if not positions:
        return text(_escape_colons(sql))

    parts: list[str] = []
    last = 0
    for index, position in enumerate(positions):
        parts.append(_escape_colons(sql[last:position]))
        parts.append(f":{prefix}{index}")
        last = position + 1
    parts.append(_escape_colons(sql[last:]))

    bound = {f"{prefix}{index}": value for index, value in enumerate(params)}
    return text("".join(parts)).bindparams(**bound)
