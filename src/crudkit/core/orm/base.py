"""Declarative base and mixins for crudkit-managed records.

Uses SQLAlchemy 2.0 ``DeclarativeBase`` with a ``type_annotation_map`` so
mapped columns can be declared with plain Python types.

Mixins
------
* **KeyMixin** — internal auto-increment ``id`` primary key.  Never
  serialized to clients.
* **PublicIdMixin** — unique-indexed string ``public_id``.
* **IntPublicIdMixin** — unique-indexed integer ``public_id``.
"""

from __future__ import annotations

import datetime

from sqlalchemy import JSON, BigInteger, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# SQLite only auto-increments columns declared exactly as INTEGER
BigInt = BigInteger().with_variant(Integer, "sqlite")


class CrudBase(DeclarativeBase):
    """Shared declarative base.

    * ``str``   → ``Text``
    * ``int``   → ``BIGINT`` (``INTEGER`` on SQLite)
    * ``datetime.datetime`` → ``DateTime``
    * ``dict`` / ``list`` → ``JSON``
    """

    type_annotation_map = {
        str: Text,
        int: BigInt,
        datetime.datetime: DateTime,
        dict: JSON,
        list: JSON,
    }


class KeyMixin:
    """Internal storage key."""

    id: Mapped[int] = mapped_column(BigInt, primary_key=True, autoincrement=True)


class PublicIdMixin:
    """Opaque string public identifier (uuid4 by default)."""

    public_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)


class IntPublicIdMixin:
    """Random integer public identifier."""

    public_id: Mapped[int] = mapped_column(BigInt, unique=True, index=True, nullable=False)
