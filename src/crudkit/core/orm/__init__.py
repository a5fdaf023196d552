"""SQLAlchemy 2.0 record store for crudkit.

Modules
-------
base        CrudBase (declarative base) + KeyMixin / PublicIdMixin
session     Engine factory, session factory, positional binding
store       SQLAlchemyRecordStore

Tags:
    crudkit, orm, sqlalchemy, declarative
"""

from __future__ import annotations

from crudkit.core.orm.base import BigInt, CrudBase, IntPublicIdMixin, KeyMixin, PublicIdMixin
from crudkit.core.orm.session import bind_positional, create_crud_engine, crud_session_factory
from crudkit.core.orm.store import SQLAlchemyRecordStore

__all__ = [
    "BigInt",
    "CrudBase",
    "KeyMixin",
    "PublicIdMixin",
    "IntPublicIdMixin",
    "create_crud_engine",
    "crud_session_factory",
    "bind_positional",
    "SQLAlchemyRecordStore",
]
